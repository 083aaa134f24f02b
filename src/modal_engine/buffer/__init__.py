"""Buffer capability, in-memory buffer, register, and undo structures."""

from .buffer import Buffer, Transaction
from .document import BufferDocument
from .protocol import CursorMove, Scrolling, TextBuffer
from .registers import RegisterKind, YankRegister
from .state import BufferState, Cursor, Selection
from .sync import BufferMirror, BufferValidationError
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor, ordered_span

__all__ = [
    "Buffer",
    "BufferDocument",
    "BufferState",
    "Cursor",
    "Selection",
    "CursorMove",
    "Scrolling",
    "TextBuffer",
    "RegisterKind",
    "YankRegister",
    "UndoTimeline",
    "UndoEntry",
    "Transaction",
    "BufferMirror",
    "BufferValidationError",
    "ensure_cursor",
    "ordered_span",
]
