"""Byte-oriented input source with push-back.

The dispatcher pulls one byte at a time and may hand bytes back when a
partially matched key sequence turns out not to be registered.
"""

from __future__ import annotations

import sys
from typing import BinaryIO


class ByteSource:
    """Pull source of single bytes over a binary stream.

    ``read_byte`` returns an ``int`` in ``0..255`` or ``None`` once the
    stream is exhausted. Bytes handed back with :meth:`unread` are returned
    again, in order, before anything else is read from the stream.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pending = bytearray()

    @classmethod
    def stdin(cls) -> ByteSource:
        return cls(sys.stdin.buffer)

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    @property
    def pending(self) -> bytes:
        """Bytes pushed back and not yet re-read."""
        return bytes(self._pending)

    def fileno(self) -> int:
        return self._stream.fileno()

    def isatty(self) -> bool:
        try:
            return self._stream.isatty()
        except (AttributeError, ValueError):
            return False

    def read_byte(self) -> int | None:
        if self._pending:
            return self._pending.pop(0)
        chunk = self._stream.read(1)
        if not chunk:
            return None
        return chunk[0]

    def unread(self, data: bytes) -> None:
        """Push *data* back so the next reads return it first."""
        self._pending[:0] = data

    def unget(self, byte: int) -> None:
        self.unread(bytes((byte,)))
