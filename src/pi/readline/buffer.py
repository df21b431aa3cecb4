"""Cursor-addressable line buffer."""

from __future__ import annotations


class Buffer:
    """Mutable single-line text with an insertion cursor.

    The cursor always satisfies ``0 <= position <= len(text)``. Moves that
    would leave that range are ignored, and none of the operations perform
    any I/O.
    """

    def __init__(self, text: str = "") -> None:
        self._chars: list[str] = list(text)
        self._cursor: int = len(self._chars)

    # -- accessors ----------------------------------------------------------

    @property
    def text(self) -> str:
        return "".join(self._chars)

    @property
    def position(self) -> int:
        return self._cursor

    @property
    def empty(self) -> bool:
        return not self._chars

    def __len__(self) -> int:
        return len(self._chars)

    def __bool__(self) -> bool:
        return bool(self._chars)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Buffer(text={self.text!r}, position={self._cursor})"

    def char_before_cursor(self) -> str | None:
        return self._chars[self._cursor - 1] if self._cursor > 0 else None

    def char_at_cursor(self) -> str | None:
        return self._chars[self._cursor] if self._cursor < len(self._chars) else None

    # -- editing ------------------------------------------------------------

    def insert(self, ch: str) -> None:
        """Insert *ch* at the cursor and advance past it."""
        self._chars.insert(self._cursor, ch)
        self._cursor += 1

    def remove(self) -> None:
        """Delete the character before the cursor (backspace)."""
        if self._cursor == 0:
            return
        self._cursor -= 1
        del self._chars[self._cursor]

    def delete(self) -> None:
        """Delete the character under the cursor (forward delete)."""
        if self._cursor < len(self._chars):
            del self._chars[self._cursor]

    def kill_to_end(self) -> str:
        """Truncate the line at the cursor and return what was removed."""
        killed = "".join(self._chars[self._cursor :])
        del self._chars[self._cursor :]
        return killed

    def reset(self, text: str) -> None:
        """Replace the whole content and put the cursor at the end."""
        self._chars = list(text)
        self._cursor = len(self._chars)

    def clear(self) -> None:
        self._chars = []
        self._cursor = 0

    # -- cursor movement ----------------------------------------------------

    def move_left(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1

    def move_right(self) -> None:
        if self._cursor < len(self._chars):
            self._cursor += 1

    def move_home(self) -> None:
        self._cursor = 0

    def move_end(self) -> None:
        self._cursor = len(self._chars)
