"""Interactive line reading.

``Readline`` ties the pieces together: it puts the terminal in raw mode,
prints the prompt, feeds input bytes through the :class:`Dispatcher`, and
keeps the screen in step with the :class:`Buffer` after every edit. A call
to :meth:`Readline.read` is one editing session and returns the line.

Redraws never rely on accumulated relative cursor moves: whenever text to
the left of the end of the line changes, the line is cleared from the
prompt onwards, rewritten, and the cursor is placed at an absolute column.
"""

from __future__ import annotations

import codecs
import logging
import unicodedata
from collections.abc import Iterator
from typing import Any, Callable, Literal

from pi.readline.buffer import Buffer
from pi.readline.dispatcher import Action, Dispatcher
from pi.readline.display import AnsiDisplay, Display
from pi.readline.history import History, HistoryView
from pi.readline.history_file import HistoryFile
from pi.readline.input import ByteSource
from pi.readline.keybindings import KeybindingsConfig, KeybindingsManager, ReadlineAction
from pi.readline.settings import ReadlineSettings
from pi.readline.terminal import NullTerminalMode, RawModeGuard, RawTerminalMode, TerminalMode
from pi.readline.utils import char_width, visible_width

logger = logging.getLogger(__name__)

SessionOutcome = Literal["accepted", "cancelled", "eof"]

Prompt = str | Callable[[], str]
Completer = Callable[[str], str]

_CR = 0x0D
_LF = 0x0A


def _printable(text: str) -> str:
    """Drop control characters, which would move the terminal cursor."""
    return "".join(ch for ch in text if unicodedata.category(ch) != "Cc")


class Readline:
    """Line editor reading from a byte source and drawing on a display.

    Every collaborator is optional and defaults to the process terminal:
    bytes from ``sys.stdin``, ANSI output on ``sys.stdout``, and raw mode
    when stdin is a TTY.
    """

    def __init__(
        self,
        *,
        source: ByteSource | None = None,
        display: Display | None = None,
        terminal_mode: TerminalMode | None = None,
        history: History | None = None,
        prompt: Prompt | None = None,
        completer: Completer | None = None,
        keybindings: KeybindingsManager | KeybindingsConfig | None = None,
        history_file: HistoryFile | None = None,
    ) -> None:
        self._source = source if source is not None else ByteSource.stdin()
        self._display: Display = display if display is not None else AnsiDisplay()
        if terminal_mode is None:
            if self._source.isatty():
                terminal_mode = RawTerminalMode(self._source.fileno())
            else:
                terminal_mode = NullTerminalMode()
        self._terminal_mode = terminal_mode

        self._history = HistoryView(history)
        self._history_file = history_file
        self._prompt: Prompt | None = prompt
        self._completer: Completer | None = completer

        if isinstance(keybindings, KeybindingsManager):
            self._keybindings = keybindings
        else:
            self._keybindings = KeybindingsManager(keybindings)

        # Per-session state, replaced at the start of every read()
        self._buffer = Buffer()
        self._prompt_text: str = ""
        self._prompt_width: int = 0
        self._outcome: SessionOutcome | None = None
        # A CR that accepted the previous line may be followed by the LF of
        # a CR LF pair; that LF does not accept an empty line.
        self._accepted_on_cr = False
        self._skip_lf = False
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

        self._dispatcher = self._build_dispatcher()

    @classmethod
    def from_settings(cls, settings: ReadlineSettings, **kwargs: Any) -> Readline:
        """Build a line editor from :class:`ReadlineSettings`.

        Persisted history is loaded up to the configured history size into
        the history created here. A caller-supplied ``history`` is used as
        is, but committed lines are still appended to the history file.
        Keyword arguments override the collaborators derived from settings.
        """
        if settings.history_file and "history_file" not in kwargs:
            kwargs["history_file"] = HistoryFile(settings.history_file)
        if "history" not in kwargs:
            history = History(
                settings.history_size,
                ignore_empty=settings.ignore_empty,
                ignore_duplicates=settings.ignore_duplicates,
            )
            history_file = kwargs.get("history_file")
            if history_file is not None:
                history.extend(history_file.load(settings.history_size))
            kwargs["history"] = history
        kwargs.setdefault("prompt", settings.prompt)
        kwargs.setdefault("keybindings", settings.keybindings or None)
        return cls(**kwargs)

    # -- configuration ------------------------------------------------------

    def set_prompt(self, prompt: Prompt | None) -> Readline:
        self._prompt = prompt
        return self

    def set_completer(self, completer: Completer | None) -> Readline:
        self._completer = completer
        return self

    def bind(self, sequence: bytes, action: Action) -> Readline:
        """Bind an extra byte sequence to a zero-argument callable."""
        self._dispatcher.register(sequence, self._command(action))
        return self

    @property
    def history(self) -> HistoryView:
        return self._history

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    @property
    def keybindings(self) -> KeybindingsManager:
        return self._keybindings

    @property
    def last_outcome(self) -> SessionOutcome | None:
        """How the most recent :meth:`read` ended."""
        return self._outcome

    # -- reading ------------------------------------------------------------

    def read(self) -> str:
        """Run one editing session and return the resulting line.

        Returns the committed line on Enter, ``""`` when the session is
        cancelled, and the uncommitted text when input runs out.
        """
        self._buffer = Buffer()
        self._decoder.reset()
        self._outcome = None
        self._skip_lf = self._accepted_on_cr
        self._accepted_on_cr = False

        with RawModeGuard(self._terminal_mode):
            self._display.move_cursor_to(0)
            self._print_prompt()
            self._dispatcher.run(self._source)

        if self._outcome is None:
            self._outcome = "eof"
        logger.debug("Read session ended: %s", self._outcome)
        return self._buffer.text

    def lines(self) -> Iterator[str]:
        """Yield accepted lines until the user cancels or input ends."""
        while True:
            line = self.read()
            if self._outcome == "accepted":
                yield line
                continue
            if line:
                yield line
            return

    # -- dispatcher wiring --------------------------------------------------

    def _build_dispatcher(self) -> Dispatcher:
        handlers: dict[ReadlineAction, Action] = {
            "acceptLine": self._accept_line,
            "cancel": self._cancel,
            "cursorLeft": self._move_left,
            "cursorRight": self._move_right,
            "cursorLineStart": self._move_home,
            "cursorLineEnd": self._move_end,
            "deleteCharBackward": self._backspace,
            "deleteCharForward": self._delete_forward,
            "deleteToLineEnd": self._kill_to_end,
            "clearLine": self._clear_line,
            "historyPrevious": self._history_previous,
            "historyNext": self._history_next,
            "complete": self._complete,
            "clearScreen": self._clear_screen,
        }
        dispatcher = Dispatcher()
        for action, handler in handlers.items():
            for sequence in self._keybindings.sequences(action):
                dispatcher.register(sequence, self._command(handler))
        dispatcher.set_default(self._self_insert)
        return dispatcher

    def _command(self, handler: Action) -> Action:
        """Wrap a bound action so pending text input lands before it runs."""

        def run() -> None:
            self._flush_decoder()
            handler()

        return run

    # -- drawing ------------------------------------------------------------

    def _print_prompt(self) -> None:
        if callable(self._prompt):
            self._prompt_text = self._prompt()
        else:
            self._prompt_text = self._prompt or ""
        self._prompt_width = visible_width(self._prompt_text)
        self._display.write(self._prompt_text)

    def _cursor_column(self) -> int:
        before = self._buffer.text[: self._buffer.position]
        return self._prompt_width + visible_width(before)

    def _refresh_line(self) -> None:
        self._display.move_cursor_to(self._prompt_width)
        self._display.clear_line()
        self._display.write(self._buffer.text)
        self._display.move_cursor_to(self._cursor_column())

    # -- actions ------------------------------------------------------------

    def _self_insert(self, byte: int) -> None:
        self._insert_text(self._decoder.decode(bytes((byte,))))

    def _flush_decoder(self) -> None:
        # An incomplete UTF-8 sequence cut short by a key binding
        self._insert_text(self._decoder.decode(b"", final=True))

    def _insert_text(self, text: str) -> None:
        for ch in text:
            if unicodedata.category(ch) == "Cc":
                logger.debug("Ignoring unbound control character %r", ch)
                continue
            self._insert(ch)

    def _insert(self, ch: str) -> None:
        at_end = self._buffer.position == len(self._buffer)
        self._buffer.insert(ch)
        if at_end:
            self._display.write(ch)
        else:
            self._refresh_line()

    def _backspace(self) -> None:
        if self._buffer.position:
            self._buffer.remove()
            self._refresh_line()

    def _delete_forward(self) -> None:
        if self._buffer.char_at_cursor() is not None:
            self._buffer.delete()
            self._refresh_line()

    def _kill_to_end(self) -> None:
        if self._buffer.kill_to_end():
            self._display.clear_line()

    def _clear_line(self) -> None:
        self._buffer.clear()
        self._display.move_cursor_to(self._prompt_width)
        self._display.clear_line()

    def _move_left(self) -> None:
        ch = self._buffer.char_before_cursor()
        if ch is not None:
            self._buffer.move_left()
            self._display.move_by(-char_width(ch))

    def _move_right(self) -> None:
        ch = self._buffer.char_at_cursor()
        if ch is not None:
            self._buffer.move_right()
            self._display.move_by(char_width(ch))

    def _move_home(self) -> None:
        self._buffer.move_home()
        self._display.move_cursor_to(self._prompt_width)

    def _move_end(self) -> None:
        self._buffer.move_end()
        self._display.move_cursor_to(self._cursor_column())

    def _history_previous(self) -> None:
        if not self._history.empty:
            self._buffer.reset(self._history.previous())
            self._refresh_line()

    def _history_next(self) -> None:
        if not self._history.empty:
            self._buffer.reset(self._history.next())
            self._refresh_line()

    def _complete(self) -> None:
        if self._completer is None:
            return
        replacement = self._completer(self._buffer.text)
        if replacement is None:
            return
        self._buffer.reset(_printable(replacement))
        self._refresh_line()

    def _clear_screen(self) -> None:
        self._display.clear_screen()
        self._display.write(self._prompt_text)
        self._refresh_line()

    def _accept_line(self) -> None:
        byte = self._dispatcher.current_byte
        if self._skip_lf and byte == _LF and self._dispatcher.commands_run == 1:
            self._skip_lf = False
            return
        line = self._buffer.text
        self._display.write("\n")
        added = self._history.add_line(line)
        self._history.reset_position()
        if added and self._history_file is not None:
            self._history_file.append(line)
        self._display.move_cursor_to(0)
        self._outcome = "accepted"
        self._accepted_on_cr = byte == _CR
        self._dispatcher.stop()

    def _cancel(self) -> None:
        if self._buffer:
            return
        self._display.write("\n")
        self._display.move_cursor_to(0)
        self._outcome = "cancelled"
        self._dispatcher.stop()
