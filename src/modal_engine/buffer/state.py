"""Cursor, selection anchor, and viewport state for buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Cursor = Tuple[int, int]  # (row, column), columns counted in characters
Selection = Tuple[Cursor, Cursor]


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + selection info tied to a BufferDocument."""

    cursor: Cursor = (0, 0)
    anchor: Optional[Cursor] = None
    viewport_top: int = 0
    viewport_height: int = 20

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)

    def start_selection(self) -> None:
        self.anchor = self.cursor

    def clear_selection(self) -> None:
        self.anchor = None

    @property
    def selection(self) -> Optional[Selection]:
        """Return ``(start, end)`` ordered, or ``None`` when nothing is anchored."""

        if self.anchor is None:
            return None
        if self.anchor <= self.cursor:
            return (self.anchor, self.cursor)
        return (self.cursor, self.anchor)
