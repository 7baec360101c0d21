"""Tests for tuipick.keybindings."""

from __future__ import annotations

import pytest

from tuipick.keybindings import (
    DEFAULT_PICKER_KEYBINDINGS,
    PickerKeybindingsManager,
    get_picker_keybindings,
    set_picker_keybindings,
)


@pytest.fixture
def restore_global_keybindings():
    previous = get_picker_keybindings()
    yield
    set_picker_keybindings(previous)


class TestDefaults:
    def test_every_action_has_keys(self) -> None:
        kb = PickerKeybindingsManager()
        for action in DEFAULT_PICKER_KEYBINDINGS:
            assert kb.get_keys(action)

    def test_navigation_defaults(self) -> None:
        kb = PickerKeybindingsManager()
        assert kb.matches("\x1b[A", "selectUp")
        assert kb.matches("\x10", "selectUp")
        assert kb.matches("\x1b[Z", "selectUp")
        assert kb.matches("\x1b[B", "selectDown")
        assert kb.matches("\t", "selectDown")
        assert kb.matches("\x0e", "selectDown")
        assert kb.matches("\x1b[5~", "selectPageUp")
        assert kb.matches("\x1b[6~", "selectPageDown")

    def test_mode_defaults(self) -> None:
        kb = PickerKeybindingsManager()
        assert kb.matches("/", "enterSearch")
        assert kb.matches("\x1b", "exitSearch")
        assert kb.matches("\r", "selectConfirm")
        assert kb.matches("\x03", "selectCancel")
        assert not kb.matches("\x1b", "selectCancel")

    def test_editing_defaults(self) -> None:
        kb = PickerKeybindingsManager()
        assert kb.matches("\x7f", "deleteCharBackward")
        assert kb.matches("\x1b[3~", "deleteCharForward")
        assert kb.matches("\x15", "clearQuery")
        assert kb.matches("\x01", "cursorLineStart")
        assert kb.matches("\x05", "cursorLineEnd")


class TestCustomBindings:
    def test_override_replaces_action_keys(self) -> None:
        kb = PickerKeybindingsManager({"listDown": "n"})
        assert kb.get_keys("listDown") == ["n"]
        assert kb.matches("n", "listDown")
        assert not kb.matches("j", "listDown")

    def test_other_actions_keep_defaults(self) -> None:
        kb = PickerKeybindingsManager({"listDown": "n"})
        assert kb.get_keys("listUp") == ["k"]

    def test_set_config_rebuilds_from_defaults(self) -> None:
        kb = PickerKeybindingsManager({"listDown": "n"})
        kb.set_config({"listUp": ["p", "ctrl+k"]})
        assert kb.get_keys("listDown") == ["j"]
        assert kb.get_keys("listUp") == ["p", "ctrl+k"]
        assert kb.matches("\x0b", "listUp")

    def test_get_keys_returns_list_for_single_key(self) -> None:
        assert PickerKeybindingsManager().get_keys("selectConfirm") == ["enter"]


class TestGlobalManager:
    def test_getter_returns_singleton(self) -> None:
        assert get_picker_keybindings() is get_picker_keybindings()

    def test_setter_replaces_singleton(self, restore_global_keybindings) -> None:
        manager = PickerKeybindingsManager({"selectConfirm": "tab"})
        set_picker_keybindings(manager)
        assert get_picker_keybindings() is manager
