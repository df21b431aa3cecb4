"""JSON settings for the line editor.

Settings live in ``~/.pi/readline.json`` unless ``$PI_READLINE_SETTINGS``
or an explicit path points elsewhere. Keys are camelCase::

    {
        "prompt": "$> ",
        "historySize": 1024,
        "historyFile": "~/.pi/readline_history",
        "ignoreEmpty": true,
        "ignoreDuplicates": true,
        "keybindings": {"historyPrevious": ["up", "ctrl+p"]}
    }
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pi.readline.history import DEFAULT_HISTORY_SIZE

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
SETTINGS_FILE_NAME = "readline.json"
SETTINGS_ENV_VAR = "PI_READLINE_SETTINGS"

# JSON key -> dataclass field
_FIELD_NAMES: dict[str, str] = {
    "prompt": "prompt",
    "historySize": "history_size",
    "historyFile": "history_file",
    "ignoreEmpty": "ignore_empty",
    "ignoreDuplicates": "ignore_duplicates",
    "keybindings": "keybindings",
}

# JSON key -> accepted value types
_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "prompt": (str,),
    "historySize": (int,),
    "historyFile": (str,),
    "ignoreEmpty": (bool,),
    "ignoreDuplicates": (bool,),
    "keybindings": (dict,),
}


def _check_value(key: str, value: Any) -> None:
    expected = _FIELD_TYPES[key]
    # bool is an int subclass but never a valid size
    if not isinstance(value, expected) or (key == "historySize" and isinstance(value, bool)):
        names = " or ".join(t.__name__ for t in expected)
        raise ValueError(f"Setting {key!r} must be {names}, got {type(value).__name__}")
    if key == "historySize" and value < 1:
        raise ValueError(f"Setting 'historySize' must be at least 1, got {value}")


@dataclass
class ReadlineSettings:
    """Resolved line editor settings."""

    prompt: str = "$> "
    history_size: int = DEFAULT_HISTORY_SIZE
    history_file: str | None = None
    ignore_empty: bool = True
    ignore_duplicates: bool = True
    keybindings: dict[str, Any] = field(default_factory=dict)
    load_error: Exception | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReadlineSettings:
        """Build settings from camelCase JSON data.

        Raises ``ValueError`` when a known key holds a value of the wrong type.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_NAMES.get(key)
            if name is None:
                logger.warning("Ignoring unknown readline setting %r", key)
                continue
            if value is not None:
                _check_value(key, value)
                kwargs[name] = value
        settings = cls(**kwargs)
        if settings.history_file:
            settings.history_file = os.path.expanduser(settings.history_file)
        return settings

    def to_dict(self) -> dict[str, Any]:
        data = {key: getattr(self, name) for key, name in _FIELD_NAMES.items()}
        return {k: v for k, v in data.items() if v is not None}


def default_settings_path() -> str:
    """``$PI_READLINE_SETTINGS`` or ``~/.pi/readline.json``."""
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return os.path.expanduser(env_path)
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME, SETTINGS_FILE_NAME)


def _load_from_file(path: str) -> tuple[dict[str, Any], Exception | None]:
    """Load settings from a JSON file. Returns (settings, error)."""
    if not os.path.exists(path):
        return {}, None
    try:
        content = Path(path).read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as e:
        return {}, e
    if not isinstance(data, dict):
        return {}, ValueError(f"Settings file {path} must contain a JSON object")
    return data, None


def load_settings(path: str | None = None) -> ReadlineSettings:
    """Load settings, falling back to defaults when the file is unusable."""
    settings_path = path or default_settings_path()
    data, error = _load_from_file(settings_path)
    if error is None:
        try:
            return ReadlineSettings.from_dict(data)
        except ValueError as e:
            error = e
    logger.warning("Could not load readline settings from %s: %s", settings_path, error)
    return ReadlineSettings(load_error=error)


def apply_overrides(settings: ReadlineSettings, **overrides: Any) -> ReadlineSettings:
    """Return a copy of *settings* with the non-``None`` *overrides* applied."""
    changes = {k: v for k, v in overrides.items() if v is not None}
    if changes.get("history_file"):
        changes["history_file"] = os.path.expanduser(changes["history_file"])
    return dataclasses.replace(settings, **changes)
