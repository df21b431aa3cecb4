"""Terminal width measurement."""

from __future__ import annotations

import re

import wcwidth as _wcwidth

# CSI sequences (colours, cursor moves) and OSC sequences (titles, links)
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def char_width(ch: str) -> int:
    """Number of terminal cells *ch* occupies (0 for non-printing)."""
    width = _wcwidth.wcwidth(ch)
    return width if width > 0 else 0


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    ANSI escape sequences are ignored, so a coloured prompt measures the
    same as its plain text.
    """
    if not text:
        return 0
    stripped = strip_ansi(text)
    if stripped.isascii() and stripped.isprintable():
        return len(stripped)
    return sum(char_width(ch) for ch in stripped)
