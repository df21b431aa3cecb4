"""Line editor keybindings manager."""

from __future__ import annotations

from typing import Literal

from pi.readline.keys import KeyId, key_sequences

ReadlineAction = Literal[
    # Session
    "acceptLine",
    "cancel",
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteToLineEnd",
    "clearLine",
    # History
    "historyPrevious",
    "historyNext",
    # Completion
    "complete",
    # Screen
    "clearScreen",
]

KeybindingsConfig = dict[ReadlineAction, KeyId | list[KeyId]]

DEFAULT_KEYBINDINGS: dict[ReadlineAction, KeyId | list[KeyId]] = {
    # Session
    "acceptLine": ["enter", "ctrl+j"],
    "cancel": "ctrl+d",
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": ["backspace", "ctrl+h"],
    "deleteCharForward": "delete",
    "deleteToLineEnd": "ctrl+k",
    "clearLine": ["ctrl+u", "ctrl+c"],
    # History
    "historyPrevious": ["up", "ctrl+p"],
    "historyNext": ["down", "ctrl+n"],
    # Completion
    "complete": "tab",
    # Screen
    "clearScreen": "ctrl+l",
}


class KeybindingsManager:
    """Resolves actions to the key identifiers and byte sequences bound to them."""

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ReadlineAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: KeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            if action not in DEFAULT_KEYBINDINGS:
                raise ValueError(f"Unknown action: {action}")
            key_array = keys if isinstance(keys, list) else [keys]
            # Validate eagerly so a typo fails at configuration time
            for key in key_array:
                key_sequences(key)
            self._action_to_keys[action] = list(key_array)

    @property
    def actions(self) -> list[ReadlineAction]:
        return list(self._action_to_keys)

    def get_keys(self, action: ReadlineAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def sequences(self, action: ReadlineAction) -> list[bytes]:
        """Every byte sequence that triggers *action*."""
        result: list[bytes] = []
        for key in self.get_keys(action):
            for seq in key_sequences(key):
                if seq not in result:
                    result.append(seq)
        return result

    def set_config(self, config: KeybindingsConfig) -> None:
        self._build_maps(config)
