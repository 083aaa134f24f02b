"""Bounds checks for positions handed to the buffer from outside."""

from __future__ import annotations

from .document import BufferDocument
from .state import Cursor
from .sync import BufferValidationError


def ensure_cursor(document: BufferDocument, cursor: Cursor) -> Cursor:
    """Return ``cursor`` if it names a real position in ``document``.

    A column may sit one past the last character of its line (where typed
    text is appended), never further.
    """

    row, col = cursor
    last_row = document.line_count - 1
    if not 0 <= row <= last_row:
        raise BufferValidationError(f"Row {row} outside 0..{last_row}", cursor=cursor)
    width = len(document.get_line(row))
    if not 0 <= col <= width:
        raise BufferValidationError(
            f"Column {col} outside 0..{width} on row {row}", cursor=cursor
        )
    return cursor


def ordered_span(
    document: BufferDocument, start: Cursor, end: Cursor
) -> tuple[Cursor, Cursor]:
    """Validate both ends and return them earliest first."""

    ensure_cursor(document, start)
    ensure_cursor(document, end)
    return (start, end) if start <= end else (end, start)


__all__ = ["ensure_cursor", "ordered_span"]
