"""
Error taxonomy for recording and playback.

Every error carries a ``kind`` so callers can tell "already in progress"
apart from "permission denied" or "unsupported key" without parsing text.
"""

from __future__ import annotations
from typing import Dict, Optional


class MacroError(Exception):
    """Base class for all macrokit errors."""

    kind = "MacroError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class RecordingError(MacroError):
    kind = "RecordingError"


class AlreadyRecording(RecordingError):
    kind = "AlreadyRecording"

    def __init__(self, message: str = "Recording already in progress"):
        super().__init__(message)


class NotRecording(RecordingError):
    kind = "NotRecording"

    def __init__(self, message: str = "No active recording"):
        super().__init__(message)


class PlaybackError(MacroError):
    kind = "PlaybackError"


class AlreadyPlaying(PlaybackError):
    kind = "AlreadyPlaying"

    def __init__(self, message: str = "Playback already in progress"):
        super().__init__(message)


class SynthesizerInitError(PlaybackError):
    """The platform refused to hand out an input-injection backend."""

    kind = "SynthesizerInitError"


class SynthesisError(PlaybackError):
    """A single injected event failed; the rest of the playback is aborted."""

    kind = "SynthesisError"


class KeyMappingError(PlaybackError):
    """A recorded key name has no synthesis mapping."""

    kind = "KeyMappingError"

    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(message or f"Unsupported key: '{key}'")
        self.key = key
