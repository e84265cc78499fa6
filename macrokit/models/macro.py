"""
Macro definition and the settings that travel with it.
"""

from __future__ import annotations
import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

import yaml
from pydantic import BaseModel, ConfigDict, Field

from macrokit.models.events import EventKind, MacroEvent


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RepeatMode(str, Enum):
    ONCE = "once"
    COUNT = "count"
    INFINITE = "infinite"


class RecordingSettings(BaseModel):
    """What to capture while recording."""

    model_config = ConfigDict(populate_by_name=True)

    record_mouse_movement: bool = Field(default=True, alias="recordMouseMovement")
    record_mouse_clicks: bool = Field(default=True, alias="recordMouseClicks")
    record_keyboard: bool = Field(default=True, alias="recordKeyboard")


class PlaybackSettings(BaseModel):
    """How a macro is replayed."""

    model_config = ConfigDict(populate_by_name=True)

    speed: float = Field(default=1.0, gt=0, description="Playback speed multiplier")
    repeat_mode: RepeatMode = Field(default=RepeatMode.ONCE, alias="repeatMode")
    repeat_count: int = Field(default=1, ge=0, alias="repeatCount", description="Used only in count mode")
    interval: Optional[int] = Field(
        default=None,
        ge=0,
        description="Pause between repetitions in ms (engine default when unset)",
    )

    @property
    def iterations(self) -> Optional[int]:
        """Number of passes over the events, or None for infinite."""
        if self.repeat_mode == RepeatMode.INFINITE:
            return None
        if self.repeat_mode == RepeatMode.COUNT:
            return self.repeat_count
        return 1


class HotkeySettings(BaseModel):
    """Application hotkeys; suppressed from capture while recording."""

    model_config = ConfigDict(populate_by_name=True)

    record_start: str = Field(default="F9", alias="recordStart")
    record_stop: str = Field(default="F10", alias="recordStop")
    playback_start: str = Field(default="F11", alias="playbackStart")
    playback_stop: str = Field(default="F12", alias="playbackStop")

    def keys(self) -> Set[str]:
        return {self.record_start, self.record_stop, self.playback_start, self.playback_stop}


class Macro(BaseModel):
    """A named, ordered sequence of recorded events plus its settings."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    events: List[MacroEvent] = Field(default_factory=list)
    recording_settings: RecordingSettings = Field(
        default_factory=RecordingSettings, alias="recordingSettings"
    )
    playback_settings: PlaybackSettings = Field(
        default_factory=PlaybackSettings, alias="playbackSettings"
    )
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")

    @property
    def duration_ms(self) -> int:
        return self.events[-1].timestamp if self.events else 0

    @property
    def action_count(self) -> int:
        """Events other than mouse moves."""
        return sum(1 for e in self.events if e.type != EventKind.MOUSE_MOVE.value)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_file(cls, path: Path) -> Macro:
        """Load a macro from a JSON or YAML file."""
        path = Path(path)
        with open(path) as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        return cls.model_validate(data)

    def export(self, path: Path, format: str = "json") -> None:
        """
        Write the macro to disk.

        Args:
            path: Output file
            format: "json" or "yaml"
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            if format == "yaml":
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
            elif format == "json":
                json.dump(self.to_dict(), f, indent=2)
            else:
                raise ValueError(f"Unsupported format: {format}")
