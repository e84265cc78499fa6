"""
Global input capture.

Listens to the OS input stream in the background, drops events the user
did not ask for (and the app's own hotkeys), and hands back a normalized
event list when the session ends.
"""

from macrokit.recording.filter import FilterResult, Notification, filter_event
from macrokit.recording.recorder import Recorder
from macrokit.recording.source import (
    InputSource,
    PynputInputSource,
    RawEvent,
    RawEventKind,
    Subscription,
)

__all__ = [
    "FilterResult",
    "Notification",
    "filter_event",
    "Recorder",
    "InputSource",
    "PynputInputSource",
    "RawEvent",
    "RawEventKind",
    "Subscription",
]
