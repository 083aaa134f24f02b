"""In-memory buffer combining document, cursor state, register, and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, ContextManager, Iterable, Optional, Sequence, Union

from modal_engine.runtime import telemetry

from .document import BufferDocument
from .protocol import CursorMove, Scrolling
from .registers import YankRegister
from .state import BufferState, Cursor, Selection
from .sync import BufferMirror
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor, ordered_span

if TYPE_CHECKING:
    from modal_engine.keymaps.models import KeyEvent


class Buffer:
    """Reference implementation of the ``TextBuffer`` capability.

    Motions follow the conventions of terminal text-area widgets: ``BACK`` and
    ``FORWARD`` wrap across line boundaries, ``UP``/``DOWN`` clamp the column
    and never move past the first or last line, and the cursor may rest one
    past the last character of a line. Restricting the cursor further is the
    interpreter's job.
    """

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        register: Optional[YankRegister] = None,
        undo: Optional[UndoTimeline] = None,
        viewport_height: Optional[int] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.register = register or YankRegister()
        self.history = undo or UndoTimeline()
        if viewport_height is not None:
            self.state.viewport_height = max(1, viewport_height)
        self._tx_depth = 0

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_lines(lines))

    # -- inspection -----------------------------------------------------

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    def selection_range(self) -> Optional[Selection]:
        return self.state.selection

    def yank_text(self) -> str:
        return self.register.text

    def set_yank_text(self, text: str) -> None:
        self.register.capture(text)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            lines=self.document.snapshot(),
            cursor=self.state.cursor,
            selection=self.state.selection,
            attributes={"register": self.register.kind.value, **(attributes or {})},
        )

    def get_text_range(self, start: Cursor, end: Cursor) -> str:
        start, end = ordered_span(self.document, start, end)
        start_offset = self.document.offset_of(*start)
        end_offset = self.document.offset_of(*end)
        return self.document.text[start_offset:end_offset]

    # -- cursor ---------------------------------------------------------

    def jump(self, row: int, col: int) -> None:
        ensure_cursor(self.document, (row, col))
        self._set_cursor(row, col)

    def move_cursor(self, move: CursorMove) -> None:
        row, col = self.state.cursor
        doc = self.document
        last_row = doc.line_count - 1
        line = doc.get_line(row)

        if move is CursorMove.BACK:
            if col > 0:
                target = (row, col - 1)
            elif row > 0:
                target = (row - 1, len(doc.get_line(row - 1)))
            else:
                target = (row, col)
        elif move is CursorMove.FORWARD:
            if col < len(line):
                target = (row, col + 1)
            elif row < last_row:
                target = (row + 1, 0)
            else:
                target = (row, col)
        elif move is CursorMove.UP:
            if row > 0:
                target = (row - 1, min(col, len(doc.get_line(row - 1))))
            else:
                target = (row, col)
        elif move is CursorMove.DOWN:
            if row < last_row:
                target = (row + 1, min(col, len(doc.get_line(row + 1))))
            else:
                target = (row, col)
        elif move is CursorMove.HEAD:
            target = (row, 0)
        elif move is CursorMove.END:
            target = (row, len(line))
        elif move is CursorMove.TOP:
            target = (0, min(col, len(doc.get_line(0))))
        elif move is CursorMove.BOTTOM:
            target = (last_row, min(col, len(doc.get_line(last_row))))
        else:
            text = doc.text
            offset = doc.offset_of(row, col)
            if move is CursorMove.WORD_FORWARD:
                offset = _word_forward(text, offset)
            elif move is CursorMove.WORD_END:
                offset = _word_end(text, offset)
            elif move is CursorMove.WORD_BACK:
                offset = _word_back(text, offset)
            else:  # pragma: no cover - exhaustive over CursorMove
                raise ValueError(f"Unsupported cursor move '{move}'")
            target = doc.cursor_at(offset)

        self._set_cursor(*target)

    def scroll(self, amount: Union[int, Scrolling]) -> None:
        """Scroll the viewport, dragging the cursor along when it leaves view.

        Integers scroll the view by that many lines. Page scrolls also move
        the cursor by the same distance, like ``CTRL-D``/``CTRL-F`` in vi.
        """

        state = self.state
        height = state.viewport_height
        last_row = self.document.line_count - 1
        row, col = state.cursor

        if isinstance(amount, Scrolling):
            half = max(1, height // 2)
            delta = {
                Scrolling.HALF_PAGE_DOWN: half,
                Scrolling.HALF_PAGE_UP: -half,
                Scrolling.PAGE_DOWN: height,
                Scrolling.PAGE_UP: -height,
            }[amount]
            row = _clamp(row + delta, 0, last_row)
        else:
            delta = amount

        state.viewport_top = _clamp(state.viewport_top + delta, 0, last_row)
        top = state.viewport_top
        row = _clamp(row, top, top + height - 1)
        row = _clamp(row, 0, last_row)
        col = min(col, len(self.document.get_line(row)))
        state.set_cursor(row, col)

    def _set_cursor(self, row: int, col: int) -> None:
        self.state.set_cursor(row, col)
        top = self.state.viewport_top
        height = self.state.viewport_height
        if row < top:
            self.state.viewport_top = row
        elif row >= top + height:
            self.state.viewport_top = row - height + 1

    # -- selection & register -------------------------------------------

    def start_selection(self) -> None:
        self.state.start_selection()

    def cancel_selection(self) -> None:
        self.state.clear_selection()

    def copy(self) -> bool:
        selection = self.state.selection
        self.state.clear_selection()
        if selection is None or selection[0] == selection[1]:
            return False
        self.register.capture(self.get_text_range(*selection))
        return True

    def cut(self) -> bool:
        selection = self.state.selection
        self.state.clear_selection()
        if selection is None or selection[0] == selection[1]:
            return False
        start, end = selection
        self.register.capture(self.get_text_range(start, end))
        self.replace_range(start, end, "", label="cut")
        return True

    def paste(self) -> bool:
        text = self.register.text
        if not text:
            return False
        self.insert_text(text, label="paste")
        return True

    # -- edits ------------------------------------------------------------

    def transaction(self, label: str) -> ContextManager["Transaction"]:
        return Transaction(self, label)

    def replace_range(self, start: Cursor, end: Cursor, text: str, *, label: str) -> None:
        start, end = ordered_span(self.document, start, end)
        with self.transaction(label):
            start_offset = self.document.offset_of(*start)
            end_offset = self.document.offset_of(*end)
            self.document.replace_text(start_offset, end_offset, text)
            self._set_cursor(*self.document.cursor_at(start_offset + len(text)))

    def insert_text(self, text: str, *, label: str = "insert_text") -> None:
        position = self.state.cursor
        self.replace_range(position, position, text, label=label)

    def insert_newline(self) -> None:
        self.insert_text("\n", label="insert_newline")

    def delete_line_by_end(self) -> bool:
        row, col = self.state.cursor
        line = self.document.get_line(row)
        if col >= len(line):
            return False
        self.register.capture(line[col:])
        self.replace_range((row, col), (row, len(line)), "", label="delete_line_by_end")
        return True

    def delete_line_by_head(self) -> bool:
        row, col = self.state.cursor
        if col == 0:
            return False
        self.register.capture(self.document.get_line(row)[:col])
        self.replace_range((row, 0), (row, col), "", label="delete_line_by_head")
        return True

    def delete_next_char(self) -> bool:
        row, col = self.state.cursor
        if col < len(self.document.get_line(row)):
            end = (row, col + 1)
        elif row < self.document.line_count - 1:
            end = (row + 1, 0)
        else:
            return False
        self.replace_range((row, col), end, "", label="delete_next_char")
        return True

    def delete_prev_char(self) -> bool:
        row, col = self.state.cursor
        if col > 0:
            start = (row, col - 1)
        elif row > 0:
            start = (row - 1, len(self.document.get_line(row - 1)))
        else:
            return False
        self.replace_range(start, (row, col), "", label="delete_prev_char")
        return True

    def delete_word_back(self) -> bool:
        doc = self.document
        end = self.state.cursor
        offset = doc.offset_of(*end)
        target = _word_back(doc.text, offset)
        if target == offset:
            return False
        start = doc.cursor_at(target)
        self.register.capture(self.get_text_range(start, end))
        self.replace_range(start, end, "", label="delete_word_back")
        return True

    def undo(self) -> bool:
        entry = self.history.undo()
        if entry is None:
            return False
        self._restore(entry.before_lines, entry.cursor_before)
        return True

    def redo(self) -> bool:
        entry = self.history.redo()
        if entry is None:
            return False
        self._restore(entry.after_lines, entry.cursor_after)
        return True

    def _restore(self, lines: Sequence[str], cursor: Cursor) -> None:
        self.document.restore(lines)
        self.state.clear_selection()
        row = _clamp(cursor[0], 0, self.document.line_count - 1)
        col = _clamp(cursor[1], 0, len(self.document.get_line(row)))
        self._set_cursor(row, col)

    # -- default text input -------------------------------------------------

    def input(self, key: "KeyEvent") -> bool:
        """Apply the default (non-modal) editing binding for ``key``.

        Returns ``False`` when the key has no binding.
        """

        if key.ctrl:
            handler = _CTRL_INPUT.get(key.key.lower())
            if handler is None:
                return False
            result = handler(self)
            return True if result is None else bool(result)
        if key.alt:
            move = _ALT_MOVES.get(key.key.lower())
            if move is None:
                return False
            self.move_cursor(move)
            return True

        name = key.key
        if name == "ENTER":
            self.insert_newline()
        elif name == "TAB":
            self.insert_text("\t")
        elif name == "BACKSPACE":
            return self.delete_prev_char()
        elif name == "DELETE":
            return self.delete_next_char()
        elif name in _NAMED_MOVES:
            self.move_cursor(_NAMED_MOVES[name])
        elif len(name) == 1:
            self.insert_text(name)
        else:
            return False
        return True


class Transaction(AbstractContextManager["Transaction"]):
    """Groups nested edits into a single undo step.

    Only the outermost transaction records history; inner ones just join it.
    """

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None
        self._before_lines: Sequence[str] = ()
        self._before_cursor: Cursor = (0, 0)
        self._outermost = False

    def __enter__(self) -> "Transaction":
        buffer = self.buffer
        self._outermost = buffer._tx_depth == 0
        buffer._tx_depth += 1
        if self._outermost:
            self._before_lines = buffer.document.snapshot()
            self._before_cursor = buffer.state.cursor
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        buffer = self.buffer
        buffer._tx_depth -= 1
        try:
            if self._outermost and exc_type is None:
                after = buffer.document.snapshot()
                if tuple(after) != tuple(self._before_lines):
                    buffer.history.push(
                        UndoEntry(
                            label=self.label,
                            before_lines=self._before_lines,
                            after_lines=after,
                            cursor_before=self._before_cursor,
                            cursor_after=buffer.state.cursor,
                        )
                    )
        finally:
            if self._span_cm is not None:
                self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _char_class(ch: str) -> int:
    if ch.isspace():
        return 0
    if ch.isalnum() or ch == "_":
        return 1
    return 2


def _word_forward(text: str, offset: int) -> int:
    size = len(text)
    if offset >= size:
        return size
    index = offset
    kind = _char_class(text[index])
    if kind:
        while index < size and _char_class(text[index]) == kind:
            index += 1
    while index < size and _char_class(text[index]) == 0:
        # An empty line is a word of its own.
        if text[index] == "\n" and index + 1 < size and text[index + 1] == "\n":
            return index + 1
        index += 1
    return index


def _word_end(text: str, offset: int) -> int:
    size = len(text)
    index = offset + 1
    while index < size and _char_class(text[index]) == 0:
        index += 1
    if index >= size:
        return offset
    kind = _char_class(text[index])
    while index + 1 < size and _char_class(text[index + 1]) == kind:
        index += 1
    return index


def _word_back(text: str, offset: int) -> int:
    index = min(offset, len(text)) - 1
    while index >= 0 and _char_class(text[index]) == 0:
        index -= 1
    if index < 0:
        return 0
    kind = _char_class(text[index])
    while index > 0 and _char_class(text[index - 1]) == kind:
        index -= 1
    return index


_CTRL_INPUT = {
    "h": Buffer.delete_prev_char,
    "d": Buffer.delete_next_char,
    "k": Buffer.delete_line_by_end,
    "j": Buffer.delete_line_by_head,
    "w": Buffer.delete_word_back,
    "m": Buffer.insert_newline,
    "u": Buffer.undo,
    "r": Buffer.redo,
    "y": Buffer.paste,
    "a": lambda buffer: buffer.move_cursor(CursorMove.HEAD),
    "e": lambda buffer: buffer.move_cursor(CursorMove.END),
    "f": lambda buffer: buffer.move_cursor(CursorMove.FORWARD),
    "b": lambda buffer: buffer.move_cursor(CursorMove.BACK),
    "p": lambda buffer: buffer.move_cursor(CursorMove.UP),
    "n": lambda buffer: buffer.move_cursor(CursorMove.DOWN),
}

_ALT_MOVES = {
    "f": CursorMove.WORD_FORWARD,
    "b": CursorMove.WORD_BACK,
}

_NAMED_MOVES = {
    "LEFT": CursorMove.BACK,
    "RIGHT": CursorMove.FORWARD,
    "UP": CursorMove.UP,
    "DOWN": CursorMove.DOWN,
    "HOME": CursorMove.HEAD,
    "END": CursorMove.END,
}
