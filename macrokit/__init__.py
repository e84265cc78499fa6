"""
macrokit - record global keyboard/mouse input and replay it with its timing.
"""

from macrokit.engine import MacroEngine
from macrokit.errors import (
    AlreadyPlaying,
    AlreadyRecording,
    KeyMappingError,
    MacroError,
    NotRecording,
    PlaybackError,
    SynthesisError,
    SynthesizerInitError,
)
from macrokit.models import HotkeySettings, Macro, PlaybackSettings, RecordingSettings, RepeatMode

__version__ = "0.1.0"

__all__ = [
    "MacroEngine",
    "AlreadyPlaying",
    "AlreadyRecording",
    "KeyMappingError",
    "MacroError",
    "NotRecording",
    "PlaybackError",
    "SynthesisError",
    "SynthesizerInitError",
    "HotkeySettings",
    "Macro",
    "PlaybackSettings",
    "RecordingSettings",
    "RepeatMode",
]
