"""
Data models for recorded macros.
"""

from macrokit.models.events import (
    EventKind,
    MouseButton,
    MacroEvent,
    MouseMoveEvent,
    MouseDownEvent,
    MouseUpEvent,
    KeyDownEvent,
    KeyUpEvent,
    MouseWheelEvent,
    UnrecognizedEvent,
    normalize,
    parse_events,
)
from macrokit.models.macro import (
    HotkeySettings,
    Macro,
    PlaybackSettings,
    RecordingSettings,
    RepeatMode,
)

__all__ = [
    "EventKind",
    "MouseButton",
    "MacroEvent",
    "MouseMoveEvent",
    "MouseDownEvent",
    "MouseUpEvent",
    "KeyDownEvent",
    "KeyUpEvent",
    "MouseWheelEvent",
    "UnrecognizedEvent",
    "normalize",
    "parse_events",
    "HotkeySettings",
    "Macro",
    "PlaybackSettings",
    "RecordingSettings",
    "RepeatMode",
]
