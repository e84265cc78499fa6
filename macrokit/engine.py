"""
Capture/replay engine exposed to the surrounding application.
"""

from __future__ import annotations
import logging
import threading
from typing import Callable, List, Optional

from macrokit.config import MacroConfig
from macrokit.errors import AlreadyPlaying
from macrokit.models.events import MacroEvent
from macrokit.models.macro import HotkeySettings, Macro, RecordingSettings
from macrokit.playback.player import CancellationToken, PlaybackReport, Player
from macrokit.playback.synthesizer import InputSynthesizer
from macrokit.recording.filter import Notification
from macrokit.recording.recorder import Recorder
from macrokit.recording.source import InputSource


logger = logging.getLogger(__name__)


class MacroEngine:
    """
    Records and replays macros.

    The engine owns one Recorder and one Player:
    1. Recording - background capture, filtered by RecordingSettings and
       with the configured hotkeys suppressed
    2. Playback - synchronous replay on the caller's thread, one at a time,
       stoppable through ``stop_playback()``

    Hotkey registration with the OS stays with the caller; it just calls
    the matching method here.
    """

    def __init__(
        self,
        config: MacroConfig | None = None,
        source: Optional[InputSource] = None,
        synthesizer: Optional[InputSynthesizer] = None,
        on_notification: Optional[Callable[[Notification], None]] = None,
    ):
        self.config = config or MacroConfig()

        if self.config.verbose:
            logging.basicConfig(level=logging.DEBUG)

        self.recorder = Recorder(
            source=source,
            stop_timeout=self.config.recording.stop_timeout,
            on_notification=on_notification,
        )
        self.player = Player(
            synthesizer=synthesizer,
            settle_interval_ms=self.config.playback.settle_interval_ms,
            unmapped_keys=self.config.playback.unmapped_keys,
        )

        self._playback_lock = threading.Lock()
        self._playback_token: Optional[CancellationToken] = None

    # =========================================================================
    # Recording
    # =========================================================================

    def start_recording(
        self,
        settings: RecordingSettings | None = None,
        hotkeys: HotkeySettings | None = None,
    ) -> None:
        """
        Start capturing input.

        Args:
            settings: What to capture (configured defaults when omitted)
            hotkeys: Keys to keep out of the recording (configured defaults
                when omitted)

        Raises:
            AlreadyRecording: a capture session is already running
        """
        self.recorder.start(
            settings or self.config.recording.settings,
            hotkeys or self.config.hotkeys,
        )

    def stop_recording(self) -> List[MacroEvent]:
        """
        Stop capturing and return the events, first timestamp at 0.

        Raises:
            NotRecording: no capture session is running
        """
        return self.recorder.stop()

    def is_recording(self) -> bool:
        return self.recorder.is_recording()

    # =========================================================================
    # Playback
    # =========================================================================

    def play_macro(self, macro: Macro, cancel: Optional[CancellationToken] = None) -> PlaybackReport:
        """
        Replay a macro on the calling thread.

        Args:
            macro: The macro to play; only its events and playback settings
                are read
            cancel: Token to stop playback from another thread. A fresh one
                is used when omitted; ``stop_playback()`` works either way.

        Raises:
            AlreadyPlaying: another playback is running
            PlaybackError: see Player.play
        """
        token = cancel or CancellationToken()
        with self._playback_lock:
            if self._playback_token is not None:
                raise AlreadyPlaying()
            self._playback_token = token

        try:
            return self.player.play(macro, cancel=token)
        finally:
            with self._playback_lock:
                self._playback_token = None

    def stop_playback(self) -> bool:
        """Signal the running playback to stop. Returns False if none is running."""
        with self._playback_lock:
            token = self._playback_token
        if token is None:
            return False
        token.cancel()
        logger.info("Playback stop requested")
        return True

    def is_playing(self) -> bool:
        with self._playback_lock:
            return self._playback_token is not None
