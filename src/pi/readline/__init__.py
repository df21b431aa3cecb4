"""pi-readline: interactive line editing for raw terminal input."""

# Line buffer
from pi.readline.buffer import Buffer

# Prefix-trie dispatch
from pi.readline.dispatcher import Action, DefaultAction, Dispatcher

# Display port
from pi.readline.display import ESCAPE_SEQUENCES, AnsiDisplay, Display

# Errors
from pi.readline.errors import (
    DisplayWriteError,
    ReadlineError,
    TerminalModeError,
    UnknownCommandError,
)

# History
from pi.readline.history import DEFAULT_HISTORY_SIZE, History, HistoryView
from pi.readline.history_file import HistoryFile

# Input port
from pi.readline.input import ByteSource

# Keybindings
from pi.readline.keybindings import (
    DEFAULT_KEYBINDINGS,
    KeybindingsConfig,
    KeybindingsManager,
    ReadlineAction,
)
from pi.readline.keys import KeyId, describe_sequence, key_sequences

# Read loop
from pi.readline.readline import Completer, Prompt, Readline, SessionOutcome

# Settings
from pi.readline.settings import ReadlineSettings, apply_overrides, load_settings

# Terminal mode
from pi.readline.terminal import (
    NullTerminalMode,
    RawModeGuard,
    RawTerminalMode,
    TerminalMode,
    TerminalSettings,
)

# Utilities
from pi.readline.utils import char_width, strip_ansi, visible_width

__all__ = [
    # Buffer
    "Buffer",
    # Dispatcher
    "Action",
    "DefaultAction",
    "Dispatcher",
    # Display
    "ESCAPE_SEQUENCES",
    "AnsiDisplay",
    "Display",
    # Errors
    "DisplayWriteError",
    "ReadlineError",
    "TerminalModeError",
    "UnknownCommandError",
    # History
    "DEFAULT_HISTORY_SIZE",
    "History",
    "HistoryFile",
    "HistoryView",
    # Input
    "ByteSource",
    # Keybindings
    "DEFAULT_KEYBINDINGS",
    "KeyId",
    "KeybindingsConfig",
    "KeybindingsManager",
    "ReadlineAction",
    "describe_sequence",
    "key_sequences",
    # Read loop
    "Completer",
    "Prompt",
    "Readline",
    "SessionOutcome",
    # Settings
    "ReadlineSettings",
    "apply_overrides",
    "load_settings",
    # Terminal
    "NullTerminalMode",
    "RawModeGuard",
    "RawTerminalMode",
    "TerminalMode",
    "TerminalSettings",
    # Utilities
    "char_width",
    "strip_ansi",
    "visible_width",
]
