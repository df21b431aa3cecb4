"""Line-oriented history persistence."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


class HistoryFile:
    """A text file holding one committed line per row, newline-terminated."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def append(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    def save(self, lines: Iterable[str]) -> None:
        """Rewrite the file with *lines*."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")

    def load(self, limit: int | None = None) -> list[str]:
        """Return the last *limit* lines (all of them when ``None``)."""
        if not self._path.exists():
            return []
        with self._path.open(encoding="utf-8", errors="replace") as f:
            lines = deque((row.rstrip("\n") for row in f), maxlen=limit)
        logger.debug("Loaded %d history lines from %s", len(lines), self._path)
        return list(lines)
