"""List-of-lines document storage for engine buffers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Text storage built on a simple list-of-lines model.

    A document always holds at least one (possibly empty) line. Edits go
    through :meth:`replace_text`, which works on the joined text so that
    multi-line inserts and deletions share one code path.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=text.split("\n"))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        collected = list(lines)
        return cls(_lines=collected or [""])

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def offset_of(self, row: int, col: int) -> int:
        offset = 0
        for i in range(row):
            offset += len(self._lines[i]) + 1  # newline
        return offset + col

    def cursor_at(self, offset: int) -> tuple[int, int]:
        running = 0
        for row, line in enumerate(self._lines):
            if offset <= running + len(line):
                return (row, offset - running)
            running += len(line) + 1
        return (len(self._lines) - 1, len(self._lines[-1]))

    def replace_text(self, start: int, end: int, text: str) -> None:
        """Replace the ``[start, end)`` character offsets with ``text``."""

        joined = self.text
        self._lines = (joined[:start] + text + joined[end:]).split("\n")
        self.version += 1

    def restore(self, lines: Sequence[str]) -> None:
        self._lines = list(lines) or [""]
        self.version += 1
