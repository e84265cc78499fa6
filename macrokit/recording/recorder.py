"""
Capture session lifecycle.
"""

from __future__ import annotations
import logging
import threading
from typing import Callable, List, Optional

from macrokit.errors import AlreadyRecording, NotRecording, RecordingError
from macrokit.models.events import MacroEvent, normalize
from macrokit.models.macro import HotkeySettings, RecordingSettings
from macrokit.recording.filter import Notification, filter_event
from macrokit.recording.source import InputSource, PynputInputSource, RawEvent, Subscription

logger = logging.getLogger(__name__)


class RecordingSession:
    """State owned by one capture session."""

    def __init__(self, settings: RecordingSettings, hotkeys: HotkeySettings):
        self.settings = settings
        self.hotkeys = hotkeys
        self.events: List[MacroEvent] = []
        self.lock = threading.Lock()
        self.subscription: Optional[Subscription] = None

    def append(self, event: MacroEvent) -> None:
        with self.lock:
            self.events.append(event)

    def drain(self) -> List[MacroEvent]:
        with self.lock:
            events = list(self.events)
            self.events.clear()
        return events


class Recorder:
    """
    Records global input into a list of MacroEvents.

    One session at a time. ``stop()`` tears the listener down and joins it,
    so repeated sessions do not accumulate background threads.

    Usage:
        recorder = Recorder()
        recorder.start(RecordingSettings(), HotkeySettings())
        ...
        events = recorder.stop()
    """

    def __init__(
        self,
        source: Optional[InputSource] = None,
        stop_timeout: float = 1.0,
        on_notification: Optional[Callable[[Notification], None]] = None,
    ):
        """
        Args:
            source: Where raw events come from (pynput by default)
            stop_timeout: Seconds to wait for the listener to finish on stop
            on_notification: Called from the listener thread for every
                suppressed hotkey; it may call ``stop()``
        """
        self.source = source or PynputInputSource()
        self.stop_timeout = stop_timeout
        self.on_notification = on_notification

        self._state_lock = threading.Lock()
        self._session: Optional[RecordingSession] = None

    def is_recording(self) -> bool:
        with self._state_lock:
            return self._session is not None

    def start(self, settings: RecordingSettings, hotkeys: HotkeySettings) -> None:
        """
        Begin a new capture session.

        Raises:
            AlreadyRecording: a session is active; it is left untouched
            RecordingError: the input source could not be started
        """
        session = RecordingSession(settings, hotkeys)
        with self._state_lock:
            if self._session is not None:
                raise AlreadyRecording()
            self._session = session

        try:
            subscription = self.source.subscribe(lambda raw: self._handle(session, raw))
        except Exception as e:
            with self._state_lock:
                if self._session is session:
                    self._session = None
            logger.error(f"Failed to start input listener: {e}")
            raise RecordingError(f"Failed to start input listener: {e}") from e

        with self._state_lock:
            stopped_meanwhile = self._session is not session
            session.subscription = subscription
        if stopped_meanwhile:
            subscription.stop()
            subscription.join(timeout=self.stop_timeout)
            logger.info("Recording stopped before the listener was up")
            return

        logger.info("Recording started")

    def stop(self) -> List[MacroEvent]:
        """
        End the current session and return its normalized events.

        Raises:
            NotRecording: no session is active
        """
        with self._state_lock:
            session = self._session
            if session is None:
                raise NotRecording()
            self._session = None
            subscription = session.subscription

        if subscription is not None:
            subscription.stop()
            subscription.join(timeout=self.stop_timeout)

        events = normalize(session.drain())
        logger.info(f"Recording stopped. Captured {len(events)} events")
        return events

    def _handle(self, session: RecordingSession, raw: RawEvent) -> None:
        with self._state_lock:
            if self._session is not session:
                return

        result = filter_event(raw, session.settings, session.hotkeys)
        if result.notification is not None:
            logger.warning(result.notification.message)
            if self.on_notification:
                self.on_notification(result.notification)
        elif result.event is not None:
            session.append(result.event)
