"""The yank register and its character-wise / line-wise classification."""

from __future__ import annotations

from enum import Enum

LINE_SEPARATOR = "\n"


class RegisterKind(str, Enum):
    CHARACTERWISE = "character"
    LINEWISE = "line"

    @classmethod
    def classify(cls, text: str) -> "RegisterKind":
        """Line-wise iff the text holds at least one line separator."""

        if LINE_SEPARATOR in text:
            return cls.LINEWISE
        return cls.CHARACTERWISE


class YankRegister:
    """Holds the single most recently captured span of text.

    Every successful copy or cut overwrites the value; pasting only reads it.
    The kind is derived from the text on demand, never stored separately.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    @property
    def kind(self) -> RegisterKind:
        return RegisterKind.classify(self._text)

    @property
    def is_linewise(self) -> bool:
        return self.kind is RegisterKind.LINEWISE

    def capture(self, text: str) -> None:
        self._text = text

    def line_block(self) -> str:
        return line_block(self._text)

    def __repr__(self) -> str:
        return f"YankRegister(text={self._text!r}, kind={self.kind.value})"


def line_block(text: str) -> str:
    """Return ``text`` as a block of whole lines.

    A span captured together with the separator that ended (or preceded) its
    lines carries exactly one extra separator; it is dropped so the block can
    be spliced between existing lines.
    """

    if text.endswith(LINE_SEPARATOR):
        return text[: -len(LINE_SEPARATOR)]
    if text.startswith(LINE_SEPARATOR):
        return text[len(LINE_SEPARATOR) :]
    return text


__all__ = ["LINE_SEPARATOR", "RegisterKind", "YankRegister", "line_block"]
