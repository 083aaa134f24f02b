"""Snapshot history behind ``u`` and ``ctrl+r``."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence

from .state import Cursor


@dataclass(frozen=True, slots=True)
class UndoEntry:
    """Whole-document snapshots taken around one outermost transaction."""

    label: str
    before_lines: Sequence[str]
    after_lines: Sequence[str]
    cursor_before: Cursor
    cursor_after: Cursor


class UndoTimeline:
    """Two stacks: steps that can be undone and steps that can be redone.

    Recording a new step forgets everything that was undone. Only the most
    recent ``limit`` steps are kept.
    """

    def __init__(self, *, limit: int = 1000) -> None:
        self._done: Deque[UndoEntry] = deque(maxlen=limit)
        self._undone: List[UndoEntry] = []

    def __len__(self) -> int:
        return len(self._done)

    def push(self, entry: UndoEntry) -> None:
        self._done.append(entry)
        self._undone.clear()

    def undo(self) -> Optional[UndoEntry]:
        if not self._done:
            return None
        entry = self._done.pop()
        self._undone.append(entry)
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self._undone:
            return None
        entry = self._undone.pop()
        self._done.append(entry)
        return entry
