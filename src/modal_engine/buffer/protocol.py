"""The capability surface the interpreter needs from a text buffer."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ContextManager, Protocol, Sequence, Union

from .state import Cursor, Selection

if TYPE_CHECKING:
    from modal_engine.keymaps.models import KeyEvent


class CursorMove(str, Enum):
    BACK = "back"
    FORWARD = "forward"
    UP = "up"
    DOWN = "down"
    WORD_FORWARD = "word_forward"
    WORD_END = "word_end"
    WORD_BACK = "word_back"
    HEAD = "head"
    END = "end"
    TOP = "top"
    BOTTOM = "bottom"


class Scrolling(str, Enum):
    HALF_PAGE_DOWN = "half_page_down"
    HALF_PAGE_UP = "half_page_up"
    PAGE_DOWN = "page_down"
    PAGE_UP = "page_up"


class TextBuffer(Protocol):
    """Operations the mode controller performs on the buffer it edits.

    Positions are ``(row, column)`` in characters. A selection runs from the
    anchor set by :meth:`start_selection` to the cursor, end-exclusive.
    """

    @property
    def cursor(self) -> Cursor: ...

    def jump(self, row: int, col: int) -> None: ...

    def move_cursor(self, move: CursorMove) -> None: ...

    def start_selection(self) -> None: ...

    def cancel_selection(self) -> None: ...

    def selection_range(self) -> Selection | None: ...

    def copy(self) -> bool: ...

    def cut(self) -> bool: ...

    def paste(self) -> bool: ...

    def insert_text(self, text: str) -> None: ...

    def insert_newline(self) -> None: ...

    def delete_line_by_end(self) -> bool: ...

    def delete_line_by_head(self) -> bool: ...

    def delete_next_char(self) -> bool: ...

    def undo(self) -> bool: ...

    def redo(self) -> bool: ...

    def scroll(self, amount: Union[int, Scrolling]) -> None: ...

    def lines(self) -> Sequence[str]: ...

    def yank_text(self) -> str: ...

    def set_yank_text(self, text: str) -> None: ...

    def input(self, key: "KeyEvent") -> bool: ...

    def transaction(self, label: str) -> ContextManager[object]: ...


__all__ = ["CursorMove", "Scrolling", "TextBuffer"]
