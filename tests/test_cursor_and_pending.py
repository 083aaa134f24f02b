from __future__ import annotations

from modal_engine.buffer import Buffer
from modal_engine.keymaps import KeyEvent
from modal_engine.modes import Mode, PendingKeyBuffer, constrain, normalize


def make_buffer(*lines: str, cursor: tuple[int, int] = (0, 0)) -> Buffer:
    buffer = Buffer.from_lines(lines)
    buffer.jump(*cursor)
    return buffer


def test_normalize_clamps_past_end_outside_insert() -> None:
    buffer = make_buffer("abc", "")

    assert normalize(buffer, (0, 3), Mode.normal()) == (0, 2)
    assert normalize(buffer, (0, 3), Mode.visual()) == (0, 2)
    assert normalize(buffer, (0, 3), Mode.operator_pending("d")) == (0, 2)
    assert normalize(buffer, (0, 3), Mode.insert()) == (0, 3)


def test_normalize_empty_line_and_row_clamp() -> None:
    buffer = make_buffer("abc", "")

    assert normalize(buffer, (1, 0), Mode.normal()) == (1, 0)
    assert normalize(buffer, (5, 9), Mode.normal()) == (1, 0)


def test_constrain_only_moves_when_needed() -> None:
    buffer = make_buffer("abc", cursor=(0, 3))

    constrain(buffer, Mode.normal())
    assert buffer.cursor == (0, 2)

    constrain(buffer, Mode.normal())
    assert buffer.cursor == (0, 2)


def test_pending_consume_matches_plain_pair() -> None:
    g = KeyEvent("g")
    pending = PendingKeyBuffer()
    assert not pending.consume(g, g, g)

    pending.hold(g)
    assert pending.key == g
    assert pending.consume(g, g, g)
    assert pending.key is None


def test_pending_rejects_modified_keys() -> None:
    g = KeyEvent("g")
    pending = PendingKeyBuffer(KeyEvent("g", ctrl=True))
    assert not pending.consume(g, g, g)

    pending.hold(g)
    assert not pending.consume(KeyEvent("g", alt=True), g, g)
    assert pending.key == g


def test_pending_hold_overwrites_single_slot() -> None:
    pending = PendingKeyBuffer()
    pending.hold(KeyEvent("g"))
    pending.hold(KeyEvent("z"))

    assert pending.key == KeyEvent("z")
    pending.clear()
    assert not pending
