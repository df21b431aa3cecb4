"""Exceptions raised by the line editor."""

from __future__ import annotations


class ReadlineError(Exception):
    """Base class for every error raised by :mod:`pi.readline`."""


class UnknownCommandError(ReadlineError):
    """No command, default handler, or shorter match exists for a byte sequence."""

    def __init__(self, sequence: bytes) -> None:
        self.sequence = bytes(sequence)
        values = ", ".join(str(b) for b in self.sequence)
        super().__init__(f"Unknown command sequence: [{values}]")


class DisplayWriteError(ReadlineError, OSError):
    """Writing to the display failed or was only partially completed."""


class TerminalModeError(ReadlineError):
    """Querying or changing the terminal attributes failed."""
