"""
Canonical key names.

Printable keys are named by their single character. Everything else goes
through one closed table shared by capture and playback, so a name that
was recorded is either replayable or rejected, never guessed.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from macrokit.errors import KeyMappingError


# Canonical name -> attribute of ``pynput.keyboard.Key``
NAMED_KEYS: Dict[str, str] = {
    "Enter": "enter",
    "Space": "space",
    "Backspace": "backspace",
    "Tab": "tab",
    "Escape": "esc",
    "Shift": "shift",
    "Control": "ctrl",
    "Alt": "alt",
    "Meta": "cmd",
    "CapsLock": "caps_lock",
    "Delete": "delete",
    "Insert": "insert",
    "Home": "home",
    "End": "end",
    "PageUp": "page_up",
    "PageDown": "page_down",
    "UpArrow": "up",
    "DownArrow": "down",
    "LeftArrow": "left",
    "RightArrow": "right",
    "PrintScreen": "print_screen",
    "ScrollLock": "scroll_lock",
    "Pause": "pause",
    "NumLock": "num_lock",
    "Menu": "menu",
}
NAMED_KEYS.update({f"F{n}": f"f{n}" for n in range(1, 21)})

# Backend name -> canonical name. Left/right modifier variants collapse.
_CANONICAL: Dict[str, str] = {attr: name for name, attr in NAMED_KEYS.items()}
_CANONICAL.update({
    "shift_l": "Shift",
    "shift_r": "Shift",
    "ctrl_l": "Control",
    "ctrl_r": "Control",
    "alt_l": "Alt",
    "alt_r": "Alt",
    "alt_gr": "Alt",
    "cmd_l": "Meta",
    "cmd_r": "Meta",
})


def key_name(key: Any) -> Optional[str]:
    """
    Canonical name for a pynput key object.

    Special keys not in the table keep their backend name (for example
    ``media_play_pause``); playback will reject those with a
    ``KeyMappingError``. Returns None when nothing identifies the key.
    """
    if key is None:
        return None

    name = getattr(key, "name", None)
    if name:
        return _CANONICAL.get(name, name)

    char = getattr(key, "char", None)
    if char:
        return char

    vk = getattr(key, "vk", None)
    if vk is not None:
        return f"vk{vk}"
    return None


def is_mapped(name: str) -> bool:
    """True when ``name`` can be synthesized."""
    return len(name) == 1 or name in NAMED_KEYS


def resolve(name: str) -> Any:
    """
    Resolve a canonical name into something ``pynput`` can press.

    Raises:
        KeyMappingError: the name is not a single character and not in
            the table, or the current platform lacks that key.
    """
    if not is_mapped(name):
        raise KeyMappingError(name)

    from pynput.keyboard import Key, KeyCode

    if len(name) == 1:
        return KeyCode.from_char(name)

    key = getattr(Key, NAMED_KEYS[name], None)
    if key is None:
        raise KeyMappingError(name, f"Key '{name}' is not available on this platform")
    return key
