from __future__ import annotations

import pytest

from modal_engine.actions.paste import paste_above, paste_below
from modal_engine.buffer import Buffer
from modal_engine.keymaps import KeyEvent
from modal_engine.modes import Mode
from modal_engine.modes.controller import ModeController


def make_buffer(*lines: str, cursor: tuple[int, int], register: str) -> Buffer:
    buffer = Buffer.from_lines(lines)
    buffer.jump(*cursor)
    buffer.set_yank_text(register)
    return buffer


def test_linewise_paste_above() -> None:
    buffer = make_buffer(
        "line1", "line2", "line3", cursor=(1, 2), register="inserted\nlines"
    )

    assert paste_above(buffer) is True

    assert buffer.lines() == ("line1", "inserted", "lines", "line2", "line3")
    assert buffer.cursor == (1, 0)
    assert buffer.yank_text() == "inserted\nlines"


def test_linewise_paste_below() -> None:
    buffer = make_buffer(
        "line1", "line2", "line3", cursor=(1, 2), register="inserted\nlines"
    )

    assert paste_below(buffer) is True

    assert buffer.lines() == ("line1", "line2", "inserted", "lines", "line3")
    assert buffer.cursor == (2, 0)


def test_linewise_paste_below_last_line() -> None:
    buffer = make_buffer("a", "b", cursor=(1, 0), register="\nc")

    paste_below(buffer)

    assert buffer.lines() == ("a", "b", "c")


def test_characterwise_paste_below() -> None:
    buffer = make_buffer("hello world", cursor=(0, 6), register="XYZ")

    paste_below(buffer)

    assert buffer.lines() == ("hello wXYZorld",)


def test_characterwise_paste_above() -> None:
    buffer = make_buffer("hello world", cursor=(0, 6), register="XYZ")

    paste_above(buffer)

    assert buffer.lines() == ("hello XYZworld",)


@pytest.mark.parametrize("col", [0, 2, 4])
def test_characterwise_paste_positions(col: int) -> None:
    pre = "abcde"
    below = make_buffer(pre, cursor=(0, col), register="XYZ")
    above = make_buffer(pre, cursor=(0, col), register="XYZ")

    paste_below(below)
    paste_above(above)

    assert below.lines() == (pre[: col + 1] + "XYZ" + pre[col + 1 :],)
    assert above.lines() == (pre[:col] + "XYZ" + pre[col:],)


def test_characterwise_paste_below_on_empty_line() -> None:
    buffer = make_buffer("", "next", cursor=(0, 0), register="XYZ")

    paste_below(buffer)

    assert buffer.lines() == ("XYZ", "next")


def test_empty_register_pastes_nothing() -> None:
    buffer = make_buffer("abc", cursor=(0, 1), register="")

    assert paste_below(buffer) is False
    assert paste_above(buffer) is False
    assert buffer.lines() == ("abc",)


def test_paste_is_a_single_undo_step() -> None:
    buffer = make_buffer("a", "b", cursor=(0, 0), register="x\ny")

    paste_below(buffer)
    assert buffer.lines() == ("a", "x", "y", "b")

    buffer.undo()
    assert buffer.lines() == ("a", "b")


def test_paste_keys_return_to_normal() -> None:
    buffer = make_buffer("hello world", cursor=(0, 6), register="XYZ")
    controller = ModeController(buffer)

    result = controller.handle(KeyEvent("P"))

    assert result.mode == Mode.normal()
    assert buffer.lines() == ("hello XYZworld",)
    assert buffer.yank_text() == "XYZ"
