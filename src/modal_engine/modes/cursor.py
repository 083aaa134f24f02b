"""Keeps the cursor on a real character while not inserting text."""

from __future__ import annotations

from modal_engine.buffer.protocol import TextBuffer
from modal_engine.buffer.state import Cursor

from .base_mode import Mode, ModeKind


def normalize(buffer: TextBuffer, cursor: Cursor, mode: Mode) -> Cursor:
    """Clamp ``cursor`` to a legal position for ``mode``.

    Outside Insert the column stops on the last character of the line (column
    0 on an empty line); Insert may rest one past the end.
    """

    lines = buffer.lines()
    row, col = cursor
    row = max(0, min(row, len(lines) - 1))
    length = len(lines[row]) if lines else 0
    if mode.kind is ModeKind.INSERT:
        limit = length
    else:
        limit = max(0, length - 1)
    return (row, max(0, min(col, limit)))


def constrain(buffer: TextBuffer, mode: Mode | None = None) -> None:
    """Move the buffer's cursor only when :func:`normalize` disagrees with it."""

    cursor = buffer.cursor
    target = normalize(buffer, cursor, mode or Mode.normal())
    if target != cursor:
        buffer.jump(*target)


__all__ = ["constrain", "normalize"]
