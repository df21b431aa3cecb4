"""Screen-control output port.

The read loop only needs a handful of primitives: write text, jump to an
absolute column, step the cursor left or right, clear the rest of the
line, and clear the screen. ``AnsiDisplay`` implements them with ANSI
escape sequences.
"""

from __future__ import annotations

import sys
from types import MappingProxyType
from typing import Protocol, TextIO

from pi.readline.errors import DisplayWriteError

# ---------------------------------------------------------------------------
# ANSI escape templates
# ---------------------------------------------------------------------------

ESCAPE_SEQUENCES = MappingProxyType(
    {
        "clear_screen": "\x1b[2J\x1b[H",
        "clear_line": "\x1b[K",
        "cursor_forward": "\x1b[{n}C",
        "cursor_backward": "\x1b[{n}D",
        "cursor_column": "\x1b[{n}G",
    }
)


# ---------------------------------------------------------------------------
# Display protocol
# ---------------------------------------------------------------------------


class Display(Protocol):
    """Output operations the line editor relies on."""

    def write(self, text: str) -> None: ...

    def move_cursor_to(self, column: int) -> None: ...

    def move_by(self, delta: int) -> None: ...

    def clear_line(self) -> None: ...

    def clear_screen(self) -> None: ...


# ---------------------------------------------------------------------------
# AnsiDisplay implementation
# ---------------------------------------------------------------------------


class AnsiDisplay:
    """Display backed by a text stream, ``sys.stdout`` by default.

    Columns are 0-based here and converted to the 1-based form the
    terminal expects. Every write is flushed; a failed or short write
    raises :class:`DisplayWriteError`.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    @property
    def stream(self) -> TextIO:
        return self._stream

    def write(self, text: str) -> None:
        if not text:
            return
        try:
            written = self._stream.write(text)
            self._stream.flush()
        except OSError as exc:
            raise DisplayWriteError(f"Display write failed: {exc}") from exc
        if written is not None and written != len(text):
            raise DisplayWriteError(
                f"Short write to display: {written} of {len(text)} characters"
            )

    def move_cursor_to(self, column: int) -> None:
        self.write(ESCAPE_SEQUENCES["cursor_column"].format(n=max(column, 0) + 1))

    def move_by(self, delta: int) -> None:
        """Move the cursor left (negative) or right (positive) by *delta* cells."""
        if delta < 0:
            self.write(ESCAPE_SEQUENCES["cursor_backward"].format(n=-delta))
        elif delta > 0:
            self.write(ESCAPE_SEQUENCES["cursor_forward"].format(n=delta))

    def clear_line(self) -> None:
        self.write(ESCAPE_SEQUENCES["clear_line"])

    def clear_screen(self) -> None:
        self.write(ESCAPE_SEQUENCES["clear_screen"])
