from __future__ import annotations

import pytest

from modal_engine.buffer import (
    Buffer,
    BufferValidationError,
    CursorMove,
    Scrolling,
    UndoTimeline,
)
from modal_engine.keymaps import KeyEvent


def make_buffer(*lines: str, cursor: tuple[int, int] = (0, 0)) -> Buffer:
    buffer = Buffer.from_lines(lines or ("",))
    buffer.jump(*cursor)
    return buffer


def test_empty_buffer_has_one_line() -> None:
    assert Buffer().lines() == ("",)
    assert Buffer.from_lines([]).lines() == ("",)


def test_jump_rejects_out_of_range_cursor() -> None:
    buffer = make_buffer("abc")

    with pytest.raises(BufferValidationError) as excinfo:
        buffer.jump(0, 4)

    assert excinfo.value.cursor == (0, 4)
    assert "0..3" in str(excinfo.value)
    with pytest.raises(BufferValidationError):
        buffer.jump(1, 0)


def test_text_range_accepts_either_order_but_checks_bounds() -> None:
    buffer = make_buffer("abc", "de")

    assert buffer.get_text_range((1, 1), (0, 1)) == "bc\nd"
    with pytest.raises(BufferValidationError) as excinfo:
        buffer.get_text_range((0, 0), (1, 3))
    assert excinfo.value.cursor == (1, 3)


def test_back_and_forward_wrap_across_lines() -> None:
    buffer = make_buffer("ab", "cd", cursor=(0, 2))

    buffer.move_cursor(CursorMove.FORWARD)
    assert buffer.cursor == (1, 0)

    buffer.move_cursor(CursorMove.BACK)
    assert buffer.cursor == (0, 2)


def test_down_clamps_column_and_stops_at_last_line() -> None:
    buffer = make_buffer("abcdef", "ab", cursor=(0, 5))

    buffer.move_cursor(CursorMove.DOWN)
    assert buffer.cursor == (1, 2)

    buffer.move_cursor(CursorMove.DOWN)
    assert buffer.cursor == (1, 2)


def test_word_motions() -> None:
    buffer = make_buffer("foo bar.baz", "qux")

    buffer.move_cursor(CursorMove.WORD_FORWARD)
    assert buffer.cursor == (0, 4)
    buffer.move_cursor(CursorMove.WORD_FORWARD)
    assert buffer.cursor == (0, 7)
    buffer.move_cursor(CursorMove.WORD_END)
    assert buffer.cursor == (0, 10)
    buffer.move_cursor(CursorMove.WORD_FORWARD)
    assert buffer.cursor == (1, 0)
    buffer.move_cursor(CursorMove.WORD_BACK)
    assert buffer.cursor == (0, 8)


def test_word_forward_stops_on_empty_line() -> None:
    buffer = make_buffer("foo", "", "bar")

    buffer.move_cursor(CursorMove.WORD_FORWARD)

    assert buffer.cursor == (1, 0)


def test_copy_and_cut_use_half_open_selection() -> None:
    buffer = make_buffer("hello world")
    buffer.start_selection()
    buffer.jump(0, 5)

    assert buffer.copy() is True
    assert buffer.yank_text() == "hello"
    assert buffer.selection_range() is None

    buffer.jump(0, 0)
    buffer.start_selection()
    buffer.jump(0, 6)
    assert buffer.cut() is True
    assert buffer.lines() == ("world",)
    assert buffer.cursor == (0, 0)
    assert buffer.yank_text() == "hello "


def test_copy_without_selection_keeps_register() -> None:
    buffer = make_buffer("abc")
    buffer.set_yank_text("keep")

    assert buffer.copy() is False
    buffer.start_selection()
    assert buffer.cut() is False
    assert buffer.yank_text() == "keep"


def test_delete_line_by_end_and_head_yank() -> None:
    buffer = make_buffer("hello world", cursor=(0, 5))

    assert buffer.delete_line_by_end() is True
    assert buffer.lines() == ("hello",)
    assert buffer.yank_text() == " world"

    assert buffer.delete_line_by_head() is True
    assert buffer.lines() == ("",)
    assert buffer.yank_text() == "hello"
    assert buffer.delete_line_by_head() is False


def test_delete_next_char_joins_lines_at_end() -> None:
    buffer = make_buffer("ab", "cd", cursor=(0, 2))

    assert buffer.delete_next_char() is True

    assert buffer.lines() == ("abcd",)


def test_transaction_groups_edits_into_one_undo_step() -> None:
    buffer = make_buffer("")

    with buffer.transaction("batch"):
        buffer.insert_text("ab")
        buffer.insert_newline()
        buffer.insert_text("cd")

    assert buffer.lines() == ("ab", "cd")
    assert buffer.undo() is True
    assert buffer.lines() == ("",)
    assert buffer.cursor == (0, 0)
    assert buffer.redo() is True
    assert buffer.lines() == ("ab", "cd")
    assert buffer.undo() is True
    assert buffer.undo() is False


def test_scroll_drags_cursor_into_view() -> None:
    buffer = Buffer.from_lines([f"line {n}" for n in range(30)])
    buffer.state.viewport_height = 10

    buffer.scroll(1)
    assert buffer.state.viewport_top == 1
    assert buffer.cursor == (1, 0)

    buffer.scroll(Scrolling.HALF_PAGE_DOWN)
    assert buffer.cursor == (6, 0)

    buffer.scroll(Scrolling.PAGE_UP)
    assert buffer.cursor == (0, 0)
    assert buffer.state.viewport_top == 0


def test_default_input_handling() -> None:
    buffer = make_buffer("")

    for char in "hi":
        assert buffer.input(KeyEvent(char)) is True
    buffer.input(KeyEvent("ENTER"))
    buffer.input(KeyEvent("x"))
    buffer.input(KeyEvent("BACKSPACE"))

    assert buffer.lines() == ("hi", "")

    buffer.jump(0, 0)
    assert buffer.input(KeyEvent("k", ctrl=True)) is True
    assert buffer.yank_text() == "hi"
    assert buffer.input(KeyEvent("y", ctrl=True)) is True
    assert buffer.lines() == ("hi", "")
    assert buffer.input(KeyEvent("F1")) is False
    assert buffer.input(KeyEvent("z", ctrl=True)) is False


def test_mirror_reports_register_kind() -> None:
    buffer = make_buffer("a", "b")
    buffer.set_yank_text("a\n")

    mirror = buffer.mirror()

    assert mirror.text == "a\nb"
    assert mirror.attributes["register"] == "line"


def test_undo_history_keeps_latest_steps_and_drops_redo_on_new_edit() -> None:
    buffer = Buffer(undo=UndoTimeline(limit=2))

    for char in "abc":
        buffer.insert_text(char)
    assert len(buffer.history) == 2

    assert buffer.undo() and buffer.undo()
    assert buffer.undo() is False
    assert buffer.lines() == ("a",)

    buffer.insert_text("z")
    assert buffer.redo() is False
    assert buffer.lines() == ("az",)
