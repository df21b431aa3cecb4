"""Tests for pi.readline.display.AnsiDisplay."""

from __future__ import annotations

import io

import pytest

from pi.readline.display import ESCAPE_SEQUENCES, AnsiDisplay
from pi.readline.errors import DisplayWriteError, ReadlineError


def make_display() -> tuple[AnsiDisplay, io.StringIO]:
    stream = io.StringIO()
    return AnsiDisplay(stream), stream


class ShortWriteStream(io.StringIO):
    def write(self, s: str) -> int:
        super().write(s[:-1])
        return len(s) - 1


class BrokenStream(io.StringIO):
    def write(self, s: str) -> int:
        raise OSError(5, "Input/output error")


class TestEscapeSequences:
    def test_mapping_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            ESCAPE_SEQUENCES["clear_line"] = ""  # type: ignore[index]

    def test_expected_operations(self) -> None:
        assert set(ESCAPE_SEQUENCES) == {
            "clear_screen",
            "clear_line",
            "cursor_forward",
            "cursor_backward",
            "cursor_column",
        }


class TestAnsiDisplay:
    def test_write_passes_text_through(self) -> None:
        display, stream = make_display()
        display.write("$> ")
        assert stream.getvalue() == "$> "

    def test_move_cursor_to_is_one_based_on_the_wire(self) -> None:
        display, stream = make_display()
        display.move_cursor_to(0)
        display.move_cursor_to(5)
        assert stream.getvalue() == "\x1b[1G\x1b[6G"

    def test_move_by(self) -> None:
        display, stream = make_display()
        display.move_by(-1)
        display.move_by(3)
        assert stream.getvalue() == "\x1b[1D\x1b[3C"

    def test_move_by_zero_writes_nothing(self) -> None:
        display, stream = make_display()
        display.move_by(0)
        assert stream.getvalue() == ""

    def test_clear_line_and_screen(self) -> None:
        display, stream = make_display()
        display.clear_line()
        display.clear_screen()
        assert stream.getvalue() == "\x1b[K\x1b[2J\x1b[H"

    def test_short_write_is_an_error(self) -> None:
        display = AnsiDisplay(ShortWriteStream())
        with pytest.raises(DisplayWriteError, match="Short write"):
            display.write("hello")

    def test_os_error_is_wrapped(self) -> None:
        display = AnsiDisplay(BrokenStream())
        with pytest.raises(DisplayWriteError) as exc_info:
            display.write("x")
        assert isinstance(exc_info.value, OSError)
        assert isinstance(exc_info.value, ReadlineError)
        assert isinstance(exc_info.value.__cause__, OSError)
