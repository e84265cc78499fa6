"""
Macro player that replays recorded events using OS-level input synthesis.
"""

from __future__ import annotations
import logging
import math
import threading
from dataclasses import dataclass
from typing import List, Optional

from macrokit.errors import KeyMappingError
from macrokit.models.events import (
    KeyDownEvent,
    KeyUpEvent,
    MacroEvent,
    MouseDownEvent,
    MouseMoveEvent,
    MouseUpEvent,
    MouseWheelEvent,
)
from macrokit.models.macro import Macro
from macrokit.playback.synthesizer import InputSynthesizer, PynputSynthesizer

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_INTERVAL_MS = 500


class CancellationToken:
    """
    Cooperative stop signal for a playback.

    ``wait`` sleeps but wakes up as soon as the token is cancelled, so a
    long gap in a macro never delays a stop request.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``. Returns True if cancelled."""
        return self._event.wait(timeout=seconds)


@dataclass
class PlaybackReport:
    iterations: int = 0
    events_synthesized: int = 0
    skipped: int = 0
    cancelled: bool = False


def scaled_delay(previous: int, current: int, speed: float) -> int:
    """Milliseconds to wait between two recorded timestamps at ``speed``."""
    return math.floor(max(current - previous, 0) / speed)


class Player:
    """
    Plays back a Macro on the calling thread.

    Gaps between events reproduce the recorded gaps divided by the macro's
    speed. Events are never reordered or coalesced.

    Usage:
        player = Player()
        token = CancellationToken()
        report = player.play(macro, cancel=token)   # token.cancel() from elsewhere
    """

    def __init__(
        self,
        synthesizer: Optional[InputSynthesizer] = None,
        settle_interval_ms: int = DEFAULT_SETTLE_INTERVAL_MS,
        unmapped_keys: str = "abort",
    ):
        """
        Initialize the player.

        Args:
            synthesizer: Input backend; a PynputSynthesizer is created on
                first use when omitted
            settle_interval_ms: Pause between repetitions unless the macro
                sets its own interval
            unmapped_keys: "abort" to raise KeyMappingError, "skip" to log
                and continue with the next event
        """
        if unmapped_keys not in ("abort", "skip"):
            raise ValueError(f"Unknown unmapped key policy: {unmapped_keys}")
        self._synthesizer = synthesizer
        self.settle_interval_ms = settle_interval_ms
        self.unmapped_keys = unmapped_keys

    @property
    def synthesizer(self) -> InputSynthesizer:
        if self._synthesizer is None:
            self._synthesizer = PynputSynthesizer()
        return self._synthesizer

    def play(self, macro: Macro, cancel: Optional[CancellationToken] = None) -> PlaybackReport:
        """
        Play the macro to completion, cancellation, or first failure.

        Raises:
            SynthesizerInitError: no input backend could be created
            SynthesisError: an injected event failed; nothing is undone
            KeyMappingError: a key has no mapping and the policy is "abort"
        """
        report = PlaybackReport()
        events = macro.events
        if not events:
            return report

        cancel = cancel or CancellationToken()
        settings = macro.playback_settings
        iterations = settings.iterations
        settle_ms = settings.interval if settings.interval is not None else self.settle_interval_ms

        # Fail on a missing backend before touching any timing
        synthesizer = self.synthesizer

        logger.info(
            f"Playing macro: {macro.name} with {len(events)} events "
            f"(speed {settings.speed}x, repeat {settings.repeat_mode.value})"
        )

        while iterations is None or report.iterations < iterations:
            if cancel.cancelled:
                report.cancelled = True
                break
            if report.iterations > 0 and settle_ms > 0 and cancel.wait(settle_ms / 1000.0):
                report.cancelled = True
                break

            logger.info(f"Playing macro iteration {report.iterations + 1}")
            if not self._play_once(synthesizer, events, settings.speed, cancel, report):
                report.cancelled = True
                break
            report.iterations += 1

        if report.cancelled:
            logger.info(f"Playback cancelled after {report.events_synthesized} events")
        else:
            logger.info("Playback completed")
        return report

    def _play_once(
        self,
        synthesizer: InputSynthesizer,
        events: List[MacroEvent],
        speed: float,
        cancel: CancellationToken,
        report: PlaybackReport,
    ) -> bool:
        """One pass over the events. Returns False when cancelled."""
        for i, event in enumerate(events):
            if cancel.cancelled:
                return False
            if i > 0:
                wait_ms = scaled_delay(events[i - 1].timestamp, event.timestamp, speed)
                if wait_ms > 0 and cancel.wait(wait_ms / 1000.0):
                    return False
            self._dispatch(synthesizer, event, report)
        return True

    def _dispatch(self, synthesizer: InputSynthesizer, event: MacroEvent, report: PlaybackReport) -> None:
        logger.debug(f"Synthesizing {event.type} at {event.timestamp}ms")

        if isinstance(event, MouseMoveEvent):
            synthesizer.move_cursor(event.data.x, event.data.y)
        elif isinstance(event, MouseDownEvent):
            synthesizer.set_button(event.data.button, press=True)
        elif isinstance(event, MouseUpEvent):
            synthesizer.set_button(event.data.button, press=False)
        elif isinstance(event, MouseWheelEvent):
            synthesizer.scroll(event.data.delta_y, axis="vertical")
        elif isinstance(event, (KeyDownEvent, KeyUpEvent)):
            try:
                synthesizer.set_key(event.data.key, press=isinstance(event, KeyDownEvent))
            except KeyMappingError as e:
                if self.unmapped_keys == "abort":
                    raise
                logger.warning(f"{e.message}, skipping")
                report.skipped += 1
                return
        else:
            logger.warning(f"Unknown event type: {event.type}, skipping")
            report.skipped += 1
            return

        report.events_synthesized += 1
