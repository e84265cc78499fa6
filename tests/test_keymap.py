"""
Tests for canonical key naming.
"""

from types import SimpleNamespace

import pytest

from macrokit.errors import KeyMappingError
from macrokit.keymap import NAMED_KEYS, is_mapped, key_name, resolve


class TestKeyName:
    """Tests for naming captured keys."""

    @pytest.mark.parametrize("backend,expected", [
        ("enter", "Enter"),
        ("esc", "Escape"),
        ("f9", "F9"),
        ("shift_r", "Shift"),
        ("ctrl_l", "Control"),
        ("alt_gr", "Alt"),
        ("cmd", "Meta"),
        ("caps_lock", "CapsLock"),
        ("page_down", "PageDown"),
        ("up", "UpArrow"),
    ])
    def test_special_keys(self, backend, expected):
        assert key_name(SimpleNamespace(name=backend)) == expected

    def test_character_keys(self):
        assert key_name(SimpleNamespace(char="a", vk=65)) == "a"
        assert key_name(SimpleNamespace(char="A", vk=65)) == "A"

    def test_unknown_special_key_keeps_backend_name(self):
        """Test that keys outside the table are named, not guessed."""
        name = key_name(SimpleNamespace(name="media_play_pause"))
        assert name == "media_play_pause"
        assert not is_mapped(name)

    def test_virtual_key_only(self):
        assert key_name(SimpleNamespace(char=None, vk=96)) == "vk96"

    def test_nothing_identifies_key(self):
        assert key_name(None) is None
        assert key_name(SimpleNamespace(char=None, vk=None)) is None


class TestMapping:
    """Tests for the closed key table."""

    def test_table_contains_common_keys(self):
        for name in ["Enter", "Space", "Backspace", "Tab", "Escape",
                     "Shift", "Control", "Alt", "Meta", "CapsLock", "F1", "F20"]:
            assert name in NAMED_KEYS

    def test_single_characters_are_mapped(self):
        assert is_mapped("a")
        assert is_mapped("7")

    def test_unknown_name_raises(self):
        """Test that an unknown name is a mapping error, not a substitution."""
        with pytest.raises(KeyMappingError) as exc_info:
            resolve("Hyper")
        assert exc_info.value.key == "Hyper"
        assert exc_info.value.kind == "KeyMappingError"
