"""Terminal mode handling.

Line editing needs the terminal in a raw-ish mode: no echo, no canonical
line buffering, and ``Ctrl-C``/``Ctrl-Z`` delivered as ordinary bytes.
``RawTerminalMode`` switches the mode with :mod:`termios`, and
``RawModeGuard`` scopes the switch so that the previous attributes are
restored on every exit path.
"""

from __future__ import annotations

import logging
import termios
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol

from pi.readline.errors import TerminalModeError

logger = logging.getLogger(__name__)

# Indices into the list returned by termios.tcgetattr
_OFLAG = 1
_LFLAG = 3
_CC = 6


@dataclass(frozen=True)
class TerminalSettings:
    """Terminal attributes applied for the duration of an edit session."""

    echo: bool = False
    canonical: bool = False
    signals: bool = False
    output_processing: bool = True
    min_chars: int = 1
    timeout: int = 0

    def apply_to(self, attrs: list) -> list:
        """Return a copy of termios *attrs* with these settings applied."""
        new = list(attrs)
        new[_CC] = list(attrs[_CC])

        lflag = new[_LFLAG]
        lflag = _set_flag(lflag, termios.ECHO, self.echo)
        lflag = _set_flag(lflag, termios.ICANON, self.canonical)
        lflag = _set_flag(lflag, termios.ISIG, self.signals)
        new[_LFLAG] = lflag

        new[_OFLAG] = _set_flag(new[_OFLAG], termios.OPOST, self.output_processing)

        new[_CC][termios.VMIN] = self.min_chars
        new[_CC][termios.VTIME] = self.timeout
        return new


def _set_flag(flags: int, flag: int, on: bool) -> int:
    return flags | flag if on else flags & ~flag


# ---------------------------------------------------------------------------
# Terminal mode ports
# ---------------------------------------------------------------------------


class TerminalMode(Protocol):
    """Switches the terminal into editing mode and back."""

    def apply(self) -> None: ...

    def reset(self) -> None: ...


class RawTerminalMode:
    """Applies :class:`TerminalSettings` to the terminal behind *fd*."""

    def __init__(self, fd: int, settings: TerminalSettings | None = None) -> None:
        self._fd = fd
        self._settings = settings or TerminalSettings()
        self._original: list | None = None

    @property
    def settings(self) -> TerminalSettings:
        return self._settings

    @property
    def active(self) -> bool:
        return self._original is not None

    def apply(self) -> None:
        try:
            original = termios.tcgetattr(self._fd)
            termios.tcsetattr(
                self._fd, termios.TCSADRAIN, self._settings.apply_to(original)
            )
        except termios.error as exc:
            raise TerminalModeError(f"Cannot set terminal mode: {exc}") from exc
        self._original = original
        logger.debug("Raw mode applied on fd %d", self._fd)

    def reset(self) -> None:
        if self._original is None:
            return
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._original)
        except termios.error as exc:
            raise TerminalModeError(f"Cannot restore terminal mode: {exc}") from exc
        self._original = None
        logger.debug("Terminal mode restored on fd %d", self._fd)


class NullTerminalMode:
    """Terminal mode port for input that is not a terminal (pipes, files)."""

    def apply(self) -> None:
        pass

    def reset(self) -> None:
        pass


class RawModeGuard:
    """Context manager holding a :class:`TerminalMode` for one session.

    ``__exit__`` always calls ``reset``, whether the block finished or
    raised. A failing reset is not suppressed: there is no safe terminal
    state to fall back to.
    """

    def __init__(self, mode: TerminalMode) -> None:
        self._mode = mode

    def __enter__(self) -> TerminalMode:
        self._mode.apply()
        return self._mode

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._mode.reset()
