"""
OS-level input synthesis.

Uses pynput controllers to inject:
- Absolute mouse moves
- Mouse button press/release
- Key press/release by literal character or named key
- Scroll wheel deltas
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from macrokit import keymap
from macrokit.errors import SynthesisError, SynthesizerInitError
from macrokit.models.events import MouseButton

logger = logging.getLogger(__name__)


class InputSynthesizer(ABC):
    """Injects input events into the OS."""

    @abstractmethod
    def move_cursor(self, x: int, y: int) -> None:
        """Move the cursor to absolute screen coordinates."""
        pass

    @abstractmethod
    def set_button(self, button: MouseButton, press: bool) -> None:
        pass

    @abstractmethod
    def set_key(self, key: str, press: bool) -> None:
        """
        Press or release a key by canonical name.

        Raises:
            KeyMappingError: the name has no synthesis mapping
        """
        pass

    @abstractmethod
    def scroll(self, amount: int, axis: str = "vertical") -> None:
        pass


class PynputSynthesizer(InputSynthesizer):
    """
    Controls the actual OS mouse and keyboard through pynput.

    Usage:
        synth = PynputSynthesizer()
        synth.move_cursor(500, 300)
        synth.set_button(MouseButton.LEFT, press=True)
        synth.set_button(MouseButton.LEFT, press=False)
        synth.set_key("Enter", press=True)
    """

    def __init__(self):
        """
        Raises:
            SynthesizerInitError: no display, missing permissions, or no
                usable pynput backend on this platform
        """
        try:
            from pynput.mouse import Controller as MouseController
            from pynput.keyboard import Controller as KeyboardController
            self._mouse = MouseController()
            self._keyboard = KeyboardController()
        except Exception as e:
            logger.error(f"Input synthesis unavailable: {e}")
            raise SynthesizerInitError(f"Failed to create input controllers: {e}") from e
        logger.info("Using pynput for OS control")

    # =========================================================================
    # Mouse Control
    # =========================================================================

    def move_cursor(self, x: int, y: int) -> None:
        def move():
            self._mouse.position = (x, y)
        self._call("Mouse move", move)

    def set_button(self, button: MouseButton, press: bool) -> None:
        from pynput.mouse import Button

        btn = {
            MouseButton.LEFT: Button.left,
            MouseButton.RIGHT: Button.right,
            MouseButton.MIDDLE: Button.middle,
        }[button]

        if press:
            self._call("Mouse button press", self._mouse.press, btn)
        else:
            self._call("Mouse button release", self._mouse.release, btn)

    def scroll(self, amount: int, axis: str = "vertical") -> None:
        if axis == "vertical":
            self._call("Mouse wheel", self._mouse.scroll, 0, amount)
        else:
            self._call("Mouse wheel", self._mouse.scroll, amount, 0)

    # =========================================================================
    # Keyboard Control
    # =========================================================================

    def set_key(self, key: str, press: bool) -> None:
        pynput_key = keymap.resolve(key)
        if press:
            self._call("Key press", self._keyboard.press, pynput_key)
        else:
            self._call("Key release", self._keyboard.release, pynput_key)

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _call(self, action: str, fn: Callable[..., Any], *args: Any) -> None:
        try:
            fn(*args)
        except Exception as e:
            logger.error(f"{action} error: {e}")
            raise SynthesisError(f"{action} error: {e}") from e
