"""Dataclasses describing key events, bindings, and action metadata."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping

ESC = "ESC"
ENTER = "ENTER"
TAB = "TAB"
BACKSPACE = "BACKSPACE"
DELETE = "DELETE"
LEFT = "LEFT"
RIGHT = "RIGHT"
UP = "UP"
DOWN = "DOWN"
HOME = "HOME"
END = "END"
NULL = "NULL"

NAMED_KEYS = frozenset(
    {ESC, ENTER, TAB, BACKSPACE, DELETE, LEFT, RIGHT, UP, DOWN, HOME, END, NULL}
)
MAX_SEQUENCE_LENGTH = 2


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A key identity plus modifier flags.

    ``key`` is either a single character or one of :data:`NAMED_KEYS`. Two
    events are equal iff identity and every modifier flag match.
    """

    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")

    @classmethod
    def parse(cls, token: str) -> "KeyEvent":
        """Build an event from ``"ctrl+r"``-style tokens."""

        if len(token) <= 1 or "+" not in token:
            return cls(token)
        *modifiers, key = token.split("+")
        if not key:  # "ctrl++"
            key = "+"
            modifiers = modifiers[:-1]
        flags = {name.strip().lower() for name in modifiers}
        unknown = flags - {"ctrl", "alt", "shift"}
        if unknown:
            raise ValueError(f"Unknown modifiers {sorted(unknown)} in '{token}'")
        return cls(
            key,
            ctrl="ctrl" in flags,
            alt="alt" in flags,
            shift="shift" in flags,
        )

    @property
    def modifiers(self) -> tuple[str, ...]:
        flags = (("alt", self.alt), ("ctrl", self.ctrl), ("shift", self.shift))
        return tuple(name for name, enabled in flags if enabled)

    @property
    def plain(self) -> bool:
        return not (self.ctrl or self.alt or self.shift)

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers + (self.key,))
        return self.key

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True, slots=True)
class KeySequence:
    """One key, or a two-key command such as ``gg``."""

    strokes: tuple[KeyEvent, ...]

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")
        if len(self.strokes) > MAX_SEQUENCE_LENGTH:
            raise ValueError(
                f"KeySequence supports at most {MAX_SEQUENCE_LENGTH} strokes"
            )

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @property
    def prefix(self) -> KeyEvent | None:
        return self.strokes[0] if len(self.strokes) > 1 else None

    @property
    def last(self) -> KeyEvent:
        return self.strokes[-1]

    @classmethod
    def from_strings(cls, *keys: str) -> "KeySequence":
        return cls(strokes=tuple(KeyEvent.parse(key) for key in keys if key))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Simple boolean condition used to gate bindings."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        expected = True
        if expr.startswith("!"):
            expected = False
            expr = expr[1:]
        return cls(expr, expected)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Callable metadata used during binding execution."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    telemetry_name: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        if self.telemetry_name is None:
            object.__setattr__(self, "telemetry_name", self.id)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence in one mode with an action."""

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        normalized_when = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", normalized_when)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "KeyEvent",
    "KeySequence",
    "WhenClause",
    "ActionRef",
    "Binding",
    "NAMED_KEYS",
    "ESC",
    "ENTER",
    "TAB",
    "BACKSPACE",
    "DELETE",
    "LEFT",
    "RIGHT",
    "UP",
    "DOWN",
    "HOME",
    "END",
    "NULL",
]
