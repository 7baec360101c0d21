"""Picker keybindings manager."""

from __future__ import annotations

from typing import Literal

from tuipick.keys import KeyId, matches_key

PickerAction = Literal[
    # Selection
    "selectUp",
    "selectDown",
    "selectPageUp",
    "selectPageDown",
    "selectConfirm",
    "selectCancel",
    # Modes
    "enterSearch",
    "exitSearch",
    # Normal mode navigation
    "listUp",
    "listDown",
    # Query editing
    "deleteCharBackward",
    "deleteCharForward",
    "clearQuery",
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
]

PickerKeybindingsConfig = dict[PickerAction, KeyId | list[KeyId]]

DEFAULT_PICKER_KEYBINDINGS: dict[PickerAction, KeyId | list[KeyId]] = {
    # Selection
    "selectUp": ["up", "shift+tab", "ctrl+p"],
    "selectDown": ["down", "tab", "ctrl+n"],
    "selectPageUp": "pageUp",
    "selectPageDown": "pageDown",
    "selectConfirm": "enter",
    "selectCancel": "ctrl+c",
    # Modes
    "enterSearch": "/",
    "exitSearch": "escape",
    # Normal mode navigation
    "listUp": "k",
    "listDown": "j",
    # Query editing
    "deleteCharBackward": "backspace",
    "deleteCharForward": ["delete", "ctrl+d"],
    "clearQuery": "ctrl+u",
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
}


class PickerKeybindingsManager:
    """Maps picker actions to the keys that trigger them."""

    def __init__(
        self, config: PickerKeybindingsConfig | None = None
    ) -> None:
        self._action_to_keys: dict[PickerAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: PickerKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_PICKER_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: PickerAction) -> bool:
        """Check if input matches a specific action."""
        return any(matches_key(data, key) for key in self._action_to_keys.get(action, []))

    def get_keys(self, action: PickerAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: PickerKeybindingsConfig) -> None:
        self._build_maps(config)


_global_picker_keybindings: PickerKeybindingsManager | None = None


def get_picker_keybindings() -> PickerKeybindingsManager:
    global _global_picker_keybindings
    if _global_picker_keybindings is None:
        _global_picker_keybindings = PickerKeybindingsManager()
    return _global_picker_keybindings


def set_picker_keybindings(manager: PickerKeybindingsManager) -> None:
    global _global_picker_keybindings
    _global_picker_keybindings = manager
