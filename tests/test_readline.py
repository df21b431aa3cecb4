"""Tests for pi.readline.readline.Readline -- the edit session loop."""

from __future__ import annotations

import io

import pytest

from pi.readline.errors import DisplayWriteError
from pi.readline.history import History
from pi.readline.history_file import HistoryFile
from pi.readline.input import ByteSource
from pi.readline.readline import Readline
from pi.readline.settings import ReadlineSettings
from virtual_terminal import RecordingTerminalMode, VirtualDisplay

# Raw escape codes for key sequences
KEY_UP = b"\x1b[A"
KEY_DOWN = b"\x1b[B"
KEY_LEFT = b"\x1b[D"
KEY_RIGHT = b"\x1b[C"
KEY_DELETE = b"\x1b[3~"
KEY_BACKSPACE = b"\x7f"
CTRL_A = b"\x01"
CTRL_B = b"\x02"
CTRL_C = b"\x03"
CTRL_D = b"\x04"
CTRL_E = b"\x05"
CTRL_K = b"\x0b"
CTRL_L = b"\x0c"
CTRL_U = b"\x15"


def make_readline(
    data: bytes, **kwargs
) -> tuple[Readline, VirtualDisplay, RecordingTerminalMode]:
    display = VirtualDisplay()
    mode = RecordingTerminalMode()
    kwargs.setdefault("prompt", "$> ")
    rl = Readline(
        source=ByteSource(io.BytesIO(data)),
        display=display,
        terminal_mode=mode,
        **kwargs,
    )
    return rl, display, mode


class TestAcceptLine:
    def test_hi_newline_is_committed(self) -> None:
        rl, display, _ = make_readline(b"hi\n")
        assert rl.read() == "hi"
        assert rl.last_outcome == "accepted"
        assert rl.history.history.entries == ["hi"]
        assert display.lines == ["$> hi"]

    def test_carriage_return_also_accepts(self) -> None:
        rl, _, _ = make_readline(b"hi\r")
        assert rl.read() == "hi"
        assert rl.last_outcome == "accepted"

    def test_accept_returns_cursor_to_column_zero(self) -> None:
        rl, display, _ = make_readline(b"x\n")
        rl.read()
        assert display.calls[-1] == ("move_cursor_to", 0)

    def test_successive_reads(self) -> None:
        rl, _, _ = make_readline(b"one\ntwo\n")
        assert rl.read() == "one"
        assert rl.read() == "two"
        assert rl.history.history.entries == ["one", "two"]

    def test_prompt_hook_called_once_per_read(self) -> None:
        calls: list[int] = []

        def prompt() -> str:
            calls.append(1)
            return f"[{len(calls)}] "

        rl, display, _ = make_readline(b"a\nb\n", prompt=prompt)
        rl.read()
        rl.read()
        assert len(calls) == 2
        assert display.lines == ["[1] a", "[2] b"]

    def test_no_prompt(self) -> None:
        rl, display, _ = make_readline(b"a\n", prompt=None)
        assert rl.read() == "a"
        assert display.lines == ["a"]

    def test_utf8_input_is_decoded(self) -> None:
        rl, _, _ = make_readline("héllo wörld\n".encode())
        assert rl.read() == "héllo wörld"

    def test_history_file_receives_committed_lines(self, tmp_path) -> None:
        path = tmp_path / "history"
        rl, _, _ = make_readline(b"hi\n\n", history_file=HistoryFile(path))
        rl.read()
        rl.read()
        # The empty line is not stored, so it is not persisted either
        assert path.read_text(encoding="utf-8") == "hi\n"


class TestCarriageReturnLineFeed:
    def test_crlf_input_accepts_each_line_once(self) -> None:
        rl, _, _ = make_readline(b"one\r\ntwo\r\n")
        assert list(rl.lines()) == ["one", "two"]
        assert rl.history.history.entries == ["one", "two"]

    def test_lf_after_typing_still_accepts(self) -> None:
        rl, _, _ = make_readline(b"one\rtwo\n")
        assert rl.read() == "one"
        assert rl.read() == "two"

    def test_second_lf_accepts_an_empty_line(self) -> None:
        rl, _, _ = make_readline(b"one\r\n\n")
        assert list(rl.lines()) == ["one", ""]

    def test_lf_only_input_keeps_empty_lines(self) -> None:
        rl, _, _ = make_readline(b"one\n\ntwo\n")
        assert list(rl.lines()) == ["one", "", "two"]


class TestCancelAndEndOfInput:
    def test_ctrl_d_on_empty_buffer_cancels(self) -> None:
        rl, _, _ = make_readline(CTRL_D)
        assert rl.read() == ""
        assert rl.last_outcome == "cancelled"
        assert len(rl.history) == 0

    def test_ctrl_d_with_text_is_ignored(self) -> None:
        rl, _, _ = make_readline(b"ab" + CTRL_D + b"c\n")
        assert rl.read() == "abc"

    def test_end_of_input_returns_uncommitted_text(self) -> None:
        rl, _, _ = make_readline(b"abc")
        assert rl.read() == "abc"
        assert rl.last_outcome == "eof"
        assert len(rl.history) == 0

    def test_end_of_input_on_empty_stream(self) -> None:
        rl, _, _ = make_readline(b"")
        assert rl.read() == ""
        assert rl.last_outcome == "eof"


class TestEditing:
    def test_insert_in_the_middle_redraws(self) -> None:
        rl, display, _ = make_readline(b"abd" + KEY_LEFT + b"c")
        assert rl.read() == "abcd"
        assert display.line == "$> abcd"
        assert display.column == 6

    def test_backspace(self) -> None:
        rl, _, _ = make_readline(b"abc" + KEY_BACKSPACE + b"\n")
        assert rl.read() == "ab"

    def test_backspace_in_the_middle(self) -> None:
        rl, display, _ = make_readline(b"abcd" + KEY_LEFT + KEY_BACKSPACE + b"\n")
        assert rl.read() == "abd"
        assert display.lines == ["$> abd"]

    def test_backspace_on_empty_line_does_nothing(self) -> None:
        rl, display, _ = make_readline(KEY_BACKSPACE + b"a\n")
        assert rl.read() == "a"
        assert "clear_line" not in display.call_names()

    def test_ctrl_u_clears_line(self) -> None:
        rl, display, _ = make_readline(b"abc" + CTRL_U + b"xy\n")
        assert rl.read() == "xy"
        assert display.lines == ["$> xy"]

    def test_ctrl_c_clears_line(self) -> None:
        rl, _, _ = make_readline(b"abc" + CTRL_C + b"z\n")
        assert rl.read() == "z"

    def test_home_and_end(self) -> None:
        rl, _, _ = make_readline(b"bc" + CTRL_A + b"a" + CTRL_E + b"d\n")
        assert rl.read() == "abcd"

    def test_forward_delete(self) -> None:
        rl, _, _ = make_readline(b"abc" + CTRL_A + KEY_DELETE + b"\n")
        assert rl.read() == "bc"

    def test_kill_to_end(self) -> None:
        rl, display, _ = make_readline(b"abcd" + CTRL_B + CTRL_B + CTRL_K + b"\n")
        assert rl.read() == "ab"
        assert display.lines == ["$> ab"]

    def test_clear_screen_redraws_prompt_and_text(self) -> None:
        rl, display, _ = make_readline(b"ab" + CTRL_L + b"\n")
        assert rl.read() == "ab"
        assert "clear_screen" in display.call_names()
        assert display.lines == ["$> ab"]

    def test_unbound_control_bytes_are_not_inserted(self) -> None:
        rl, _, _ = make_readline(b"a\x07\x1fb\n")
        assert rl.read() == "ab"

    def test_escape_then_character(self) -> None:
        rl, _, _ = make_readline(b"\x1bx\n")
        assert rl.read() == "x"

    def test_incomplete_utf8_is_replaced_where_it_was_typed(self) -> None:
        rl, _, _ = make_readline(b"ab\xc3" + KEY_LEFT + b"c\n")
        assert rl.read() == "abc\ufffd"

    def test_multibyte_character_before_a_bound_key(self) -> None:
        rl, _, _ = make_readline("é".encode() + KEY_LEFT + b"x\n")
        assert rl.read() == "xé"


class TestCursorMovement:
    def test_left_and_right_emit_single_cell_moves(self) -> None:
        rl, display, _ = make_readline(b"ab" + KEY_LEFT + KEY_RIGHT + b"\n")
        rl.read()
        assert ("move_by", -1) in display.calls
        assert ("move_by", 1) in display.calls

    def test_left_at_start_is_a_noop(self) -> None:
        rl, display, _ = make_readline(KEY_LEFT + b"a\n")
        assert rl.read() == "a"
        assert "move_by" not in display.call_names()

    def test_right_at_end_is_a_noop(self) -> None:
        rl, display, _ = make_readline(b"a" + KEY_RIGHT + b"\n")
        rl.read()
        assert "move_by" not in display.call_names()

    def test_wide_character_moves_two_cells(self) -> None:
        rl, display, _ = make_readline("日".encode() + KEY_LEFT)
        rl.read()
        assert ("move_by", -2) in display.calls

    def test_ss3_arrows(self) -> None:
        rl, _, _ = make_readline(b"ac\x1bODb\n")
        assert rl.read() == "abc"


class TestHistoryNavigation:
    def test_up_recalls_previous_lines(self) -> None:
        rl, display, _ = make_readline(b"one\ntwo\n" + KEY_UP + KEY_UP + b"\n")
        rl.read()
        rl.read()
        assert rl.read() == "one"
        assert display.lines[-1] == "$> one"

    def test_down_returns_to_fresh_line(self) -> None:
        rl, _, _ = make_readline(b"one\n" + KEY_UP + KEY_DOWN + b"\n")
        rl.read()
        assert rl.read() == ""
        assert rl.history.history.entries == ["one"]

    def test_up_with_empty_history_does_nothing(self) -> None:
        rl, display, _ = make_readline(KEY_UP + b"x\n")
        assert rl.read() == "x"
        assert "clear_line" not in display.call_names()

    def test_recalled_line_can_be_edited(self) -> None:
        rl, _, _ = make_readline(b"ls\n" + KEY_UP + b" -l\n")
        rl.read()
        assert rl.read() == "ls -l"

    def test_navigation_restarts_after_commit(self) -> None:
        rl, _, _ = make_readline(b"a\nb\n" + KEY_UP + KEY_UP + b"\n" + KEY_UP + b"\n")
        rl.read()
        rl.read()
        assert rl.read() == "a"
        assert rl.read() == "a"

    def test_shared_history_object(self) -> None:
        history = History()
        history.add_line("earlier")
        rl, _, _ = make_readline(KEY_UP + b"\n", history=history)
        assert rl.read() == "earlier"


class TestCompletion:
    def test_tab_replaces_buffer_with_completion(self) -> None:
        rl, display, _ = make_readline(b"sam\t\n", completer=lambda text: text + "ple")
        assert rl.read() == "sample"
        assert display.lines == ["$> sample"]

    def test_tab_without_completer_is_a_noop(self) -> None:
        rl, _, _ = make_readline(b"a\tb\n")
        assert rl.read() == "ab"

    def test_completer_returning_none_keeps_text(self) -> None:
        rl, _, _ = make_readline(b"abc\t\n", completer=lambda text: None)
        assert rl.read() == "abc"

    def test_control_characters_are_dropped_from_completion(self) -> None:
        rl, display, _ = make_readline(b"a\t\n", completer=lambda text: "ab\ncd\x1b[2J")
        assert rl.read() == "abcd[2J"
        assert "\x1b" not in display.output
        assert display.lines == ["$> abcd[2J"]

    def test_set_completer_is_fluent(self) -> None:
        rl, _, _ = make_readline(b"x\t\n")
        assert rl.set_completer(lambda text: "xyz").set_prompt("> ") is rl
        assert rl.read() == "xyz"


class TestKeybindings:
    def test_custom_binding_replaces_default(self) -> None:
        rl, _, _ = make_readline(
            b"one\n" + b"\x10\n" + KEY_UP + b"\n",
            keybindings={"historyPrevious": "ctrl+p"},
        )
        rl.read()
        assert rl.read() == "one"
        # The up arrow is now unbound; its bytes after ESC are typed text
        assert rl.read() == "[A"

    def test_bind_extra_sequence(self) -> None:
        hits: list[int] = []
        rl, _, _ = make_readline(b"\x1bqx\n")
        rl.bind(b"\x1bq", lambda: hits.append(1))
        assert rl.read() == "x"
        assert hits == [1]


class TestTerminalMode:
    def test_mode_applied_and_reset_per_session(self) -> None:
        rl, _, mode = make_readline(b"a\nb\n")
        rl.read()
        assert mode.events == ["apply", "reset"]
        rl.read()
        assert mode.events == ["apply", "reset", "apply", "reset"]

    def test_mode_reset_when_completer_raises(self) -> None:
        def broken(text: str) -> str:
            raise RuntimeError("completion failed")

        rl, _, mode = make_readline(b"a\t\n", completer=broken)
        with pytest.raises(RuntimeError, match="completion failed"):
            rl.read()
        assert mode.events == ["apply", "reset"]

    def test_mode_reset_when_display_fails(self) -> None:
        class FailingDisplay(VirtualDisplay):
            def write(self, text: str) -> None:
                if text == "x":
                    raise DisplayWriteError("Short write to display: 0 of 1 characters")
                super().write(text)

        display = FailingDisplay()
        mode = RecordingTerminalMode()
        rl = Readline(
            source=ByteSource(io.BytesIO(b"x\n")),
            display=display,
            terminal_mode=mode,
        )
        with pytest.raises(DisplayWriteError):
            rl.read()
        assert mode.events == ["apply", "reset"]

    def test_non_tty_source_needs_no_terminal_mode(self) -> None:
        display = VirtualDisplay()
        rl = Readline(source=ByteSource(io.BytesIO(b"ok\n")), display=display)
        assert rl.read() == "ok"


class TestLines:
    def test_yields_until_cancel(self) -> None:
        rl, _, _ = make_readline(b"a\nb\n" + CTRL_D + b"ignored\n")
        assert list(rl.lines()) == ["a", "b"]

    def test_partial_line_at_end_of_input_is_yielded(self) -> None:
        rl, _, _ = make_readline(b"a\nb")
        assert list(rl.lines()) == ["a", "b"]

    def test_empty_accepted_line_is_yielded(self) -> None:
        rl, _, _ = make_readline(b"\n" + CTRL_D)
        assert list(rl.lines()) == [""]


class TestFromSettings:
    def test_preloads_history_file(self, tmp_path) -> None:
        path = tmp_path / "history"
        path.write_text("old1\nold2\n", encoding="utf-8")
        settings = ReadlineSettings(prompt="% ", history_file=str(path), history_size=10)
        display = VirtualDisplay()
        rl = Readline.from_settings(
            settings,
            source=ByteSource(io.BytesIO(KEY_UP + b"\n")),
            display=display,
            terminal_mode=RecordingTerminalMode(),
        )
        assert rl.read() == "old2"
        assert display.lines == ["% old2"]
        # Repeating the newest entry is not stored again
        assert path.read_text(encoding="utf-8") == "old1\nold2\n"

    def test_history_size_limits_preload(self, tmp_path) -> None:
        path = tmp_path / "history"
        path.write_text("a\nb\nc\n", encoding="utf-8")
        settings = ReadlineSettings(history_file=str(path), history_size=2)
        rl = Readline.from_settings(
            settings,
            source=ByteSource(io.BytesIO(b"")),
            display=VirtualDisplay(),
        )
        assert rl.history.history.entries == ["b", "c"]

    def test_supplied_history_still_persists_lines(self, tmp_path) -> None:
        path = tmp_path / "history"
        path.write_text("old\n", encoding="utf-8")
        history = History()
        rl = Readline.from_settings(
            ReadlineSettings(history_file=str(path)),
            history=history,
            source=ByteSource(io.BytesIO(b"new\n")),
            display=VirtualDisplay(),
        )
        assert rl.read() == "new"
        # The supplied history is not preloaded from the file
        assert history.entries == ["new"]
        assert path.read_text(encoding="utf-8") == "old\nnew\n"

    def test_keybindings_from_settings(self) -> None:
        settings = ReadlineSettings(keybindings={"complete": "ctrl+o"})
        rl = Readline.from_settings(
            settings,
            source=ByteSource(io.BytesIO(b"a\x0f\n")),
            display=VirtualDisplay(),
            completer=lambda text: text + "!",
        )
        assert rl.read() == "a!"
