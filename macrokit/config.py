"""
Configuration management for macrokit.
"""

from __future__ import annotations
from pathlib import Path
from typing import Literal
from pydantic import BaseModel, Field
import yaml

from macrokit.models.macro import HotkeySettings, RecordingSettings


class RecordingConfig(BaseModel):
    """Configuration for capture sessions."""

    stop_timeout: float = Field(default=1.0, gt=0, description="Seconds to wait for listener threads on stop")
    settings: RecordingSettings = Field(default_factory=RecordingSettings, description="Default capture filters")


class PlaybackConfig(BaseModel):
    """Configuration for macro playback."""

    settle_interval_ms: int = Field(default=500, ge=0, description="Pause between repetitions in milliseconds")
    unmapped_keys: Literal["abort", "skip"] = Field(
        default="abort",
        description="What to do with a key name that has no synthesis mapping",
    )
    countdown: int = Field(default=3, ge=0, description="Seconds to wait before CLI playback starts")


class MacroConfig(BaseModel):
    """Main configuration."""

    recording: RecordingConfig = Field(default_factory=RecordingConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    hotkeys: HotkeySettings = Field(default_factory=HotkeySettings)

    verbose: bool = Field(default=False, description="Enable verbose logging")

    @classmethod
    def from_file(cls, path: Path) -> MacroConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def to_file(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json", by_alias=True), f, default_flow_style=False)
