"""
Global input sources.

A source delivers raw mouse/keyboard events to a callback from its own
background threads until the returned subscription is stopped.
"""

from __future__ import annotations
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from macrokit.keymap import key_name

logger = logging.getLogger(__name__)


class RawEventKind(str, Enum):
    MOVE = "move"
    BUTTON_PRESS = "button_press"
    BUTTON_RELEASE = "button_release"
    KEY_PRESS = "key_press"
    KEY_RELEASE = "key_release"
    WHEEL = "wheel"


@dataclass
class RawEvent:
    """An input event as observed, before any filtering."""
    kind: RawEventKind
    timestamp: int
    x: int = 0
    y: int = 0
    button: Optional[str] = None
    key: Optional[str] = None
    delta_x: int = 0
    delta_y: int = 0


RawEventCallback = Callable[[RawEvent], None]


def monotonic_ms() -> int:
    """Milliseconds on a clock that never goes backwards."""
    return time.monotonic_ns() // 1_000_000


class Subscription(ABC):
    """Handle on a running listening activity."""

    @abstractmethod
    def stop(self) -> None:
        """Ask the listening activity to terminate."""
        pass

    @abstractmethod
    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for termination. Returns True once nothing is running."""
        pass


class InputSource(ABC):
    """Abstract source of global input events."""

    @abstractmethod
    def subscribe(self, callback: RawEventCallback) -> Subscription:
        """Start delivering events to ``callback``."""
        pass


class ListenerSubscription(Subscription):
    """Subscription over a group of pynput listener threads."""

    def __init__(self, listeners: List[threading.Thread]):
        self._listeners = listeners

    def stop(self) -> None:
        for listener in self._listeners:
            if listener.is_alive():
                listener.stop()

    def join(self, timeout: Optional[float] = None) -> bool:
        # A listener stopping itself from its own callback exits once the
        # callback returns; it cannot be joined from inside.
        current = threading.current_thread()
        others = [listener for listener in self._listeners if listener is not current]
        for listener in others:
            listener.join(timeout=timeout)
        alive = [listener for listener in others if listener.is_alive()]
        if alive:
            logger.warning(f"{len(alive)} listener thread(s) still running after {timeout}s")
        return not alive


class PynputInputSource(InputSource):
    """
    Global mouse and keyboard hooks via pynput.

    Both listeners stamp and dispatch through one lock, so events reach the
    callback in timestamp order even though they come from two threads.

    Usage:
        source = PynputInputSource()
        subscription = source.subscribe(print)
        ...
        subscription.stop()
        subscription.join(timeout=1.0)
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or monotonic_ms

    def subscribe(self, callback: RawEventCallback) -> Subscription:
        from pynput import keyboard, mouse

        lock = threading.Lock()

        def emit(kind: RawEventKind, **fields) -> None:
            with lock:
                callback(RawEvent(kind=kind, timestamp=self._clock(), **fields))

        def on_move(x, y):
            emit(RawEventKind.MOVE, x=int(x), y=int(y))

        def on_click(x, y, button, pressed):
            kind = RawEventKind.BUTTON_PRESS if pressed else RawEventKind.BUTTON_RELEASE
            emit(kind, x=int(x), y=int(y), button=getattr(button, "name", None))

        def on_scroll(x, y, dx, dy):
            emit(RawEventKind.WHEEL, x=int(x), y=int(y), delta_x=int(dx), delta_y=int(dy))

        def on_press(key):
            emit(RawEventKind.KEY_PRESS, key=key_name(key))

        def on_release(key):
            emit(RawEventKind.KEY_RELEASE, key=key_name(key))

        mouse_listener = mouse.Listener(on_move=on_move, on_click=on_click, on_scroll=on_scroll)
        keyboard_listener = keyboard.Listener(on_press=on_press, on_release=on_release)
        listeners = [mouse_listener, keyboard_listener]
        subscription = ListenerSubscription(listeners)

        try:
            for listener in listeners:
                listener.daemon = True
                listener.start()
            for listener in listeners:
                listener.wait()
        except Exception:
            subscription.stop()
            raise

        logger.debug("pynput listeners started")
        return subscription
