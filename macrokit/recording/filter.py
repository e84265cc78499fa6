"""
Per-event capture filtering.

Decides whether a raw event becomes a MacroEvent, and suppresses the
application's own hotkeys so they never end up inside a recording.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from macrokit.models.events import (
    MacroEvent,
    MouseButton,
    key_down,
    key_up,
    mouse_down,
    mouse_move,
    mouse_up,
    mouse_wheel,
)
from macrokit.models.macro import HotkeySettings, RecordingSettings
from macrokit.recording.source import RawEvent, RawEventKind


HOTKEY_IGNORED = "hotkey-ignored"

_BUTTONS: Dict[str, MouseButton] = {
    "left": MouseButton.LEFT,
    "right": MouseButton.RIGHT,
    "middle": MouseButton.MIDDLE,
}


@dataclass
class Notification:
    """Side-channel message raised instead of recording an event."""
    key: str
    kind: str = HOTKEY_IGNORED

    @property
    def message(self) -> str:
        return f"Hotkey '{self.key}' detected and ignored"


@dataclass
class FilterResult:
    event: Optional[MacroEvent] = None
    notification: Optional[Notification] = None


def filter_event(
    raw: RawEvent,
    settings: RecordingSettings,
    hotkeys: HotkeySettings,
) -> FilterResult:
    """
    Convert and filter one raw event.

    Order: the settings gate first, then the hotkey check (key events only).
    Dropped events produce an empty result; a hotkey produces a notification.
    """
    kind = raw.kind
    ts = raw.timestamp

    if kind == RawEventKind.MOVE:
        if not settings.record_mouse_movement:
            return FilterResult()
        return FilterResult(event=mouse_move(raw.x, raw.y, ts))

    if kind in (RawEventKind.BUTTON_PRESS, RawEventKind.BUTTON_RELEASE):
        button = _BUTTONS.get((raw.button or "").lower())
        if not settings.record_mouse_clicks or button is None:
            return FilterResult()
        if kind == RawEventKind.BUTTON_PRESS:
            return FilterResult(event=mouse_down(button, ts))
        return FilterResult(event=mouse_up(button, ts))

    if kind == RawEventKind.WHEEL:
        if not settings.record_mouse_clicks:
            return FilterResult()
        return FilterResult(event=mouse_wheel(raw.delta_x, raw.delta_y, ts))

    if kind in (RawEventKind.KEY_PRESS, RawEventKind.KEY_RELEASE):
        if not settings.record_keyboard or not raw.key:
            return FilterResult()
        if raw.key in hotkeys.keys():
            return FilterResult(notification=Notification(key=raw.key))
        if kind == RawEventKind.KEY_PRESS:
            return FilterResult(event=key_down(raw.key, ts))
        return FilterResult(event=key_up(raw.key, ts))

    return FilterResult()
