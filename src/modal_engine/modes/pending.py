"""Single-slot memory for the first key of a two-key command."""

from __future__ import annotations

from typing import Optional

from modal_engine.keymaps.models import KeyEvent


class PendingKeyBuffer:
    """Remembers at most one key event.

    Holding a new key overwrites the old one. A two-key command matches only
    when both the remembered key and the incoming key are unmodified and
    equal the expected pair; a successful match empties the slot.
    """

    __slots__ = ("_key",)

    def __init__(self, key: Optional[KeyEvent] = None) -> None:
        self._key = key

    @property
    def key(self) -> Optional[KeyEvent]:
        return self._key

    def hold(self, key: KeyEvent) -> None:
        self._key = key

    def clear(self) -> None:
        self._key = None

    def matches(self, key: KeyEvent, first: KeyEvent, second: KeyEvent) -> bool:
        held = self._key
        if held is None or not (held.plain and key.plain):
            return False
        return held.key == first.key and key.key == second.key

    def consume(self, key: KeyEvent, first: KeyEvent, second: KeyEvent) -> bool:
        if not self.matches(key, first, second):
            return False
        self._key = None
        return True

    def __bool__(self) -> bool:
        return self._key is not None

    def __repr__(self) -> str:
        return f"PendingKeyBuffer(key={self._key!r})"


__all__ = ["PendingKeyBuffer"]
