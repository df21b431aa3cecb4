"""Bounded line history and a navigation cursor over it."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 1024


class History:
    """Committed lines, oldest first, holding at most *capacity* entries.

    Adding a line to a full history evicts the oldest one.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_HISTORY_SIZE,
        *,
        ignore_empty: bool = True,
        ignore_duplicates: bool = True,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._entries: deque[str] = deque(maxlen=capacity)
        self.ignore_empty = ignore_empty
        self.ignore_duplicates = ignore_duplicates

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def get_line(self, n: int) -> str:
        if not 0 <= n < len(self._entries):
            raise IndexError(f"History index {n} out of range")
        return self._entries[n]

    def add_line(self, line: str) -> bool:
        """Store *line*; returns ``False`` when the line was rejected."""
        if self.ignore_empty and not line:
            return False
        if self.ignore_duplicates and self._entries and self._entries[-1] == line:
            return False
        if len(self._entries) == self.capacity:
            logger.debug("History full, evicting %r", self._entries[0])
        self._entries.append(line)
        return True

    def extend(self, lines: Iterable[str]) -> int:
        """Add several lines; returns how many were stored."""
        return sum(1 for line in lines if self.add_line(line))

    def clear(self) -> None:
        self._entries.clear()


class HistoryView:
    """Up/down navigation over a :class:`History`.

    The cursor ranges over ``[0, len(history)]``; ``len(history)`` is the
    fresh-line position just past the newest entry. ``previous`` saturates
    at the oldest entry. ``next`` returns ``""`` once it reaches the
    fresh-line position, and keeps returning ``""`` there.
    """

    def __init__(self, history: History | None = None) -> None:
        self._history = history if history is not None else History()
        self._cursor: int = len(self._history)

    @property
    def history(self) -> History:
        return self._history

    @property
    def position(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._history)

    @property
    def empty(self) -> bool:
        return len(self._history) == 0

    def add_line(self, line: str) -> bool:
        added = self._history.add_line(line)
        if added:
            self._cursor = len(self._history)
        return added

    def reset_position(self) -> None:
        self._cursor = len(self._history)

    def previous(self) -> str:
        if self.empty:
            return ""
        if self._cursor > 0:
            self._cursor -= 1
        return self._history.get_line(self._cursor)

    def next(self) -> str:
        if self.empty:
            return ""
        size = len(self._history)
        if self._cursor < size:
            self._cursor += 1
        if self._cursor == size:
            return ""
        return self._history.get_line(self._cursor)
