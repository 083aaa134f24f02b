"""Mode values, transitions, and the shared context every handler sees."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from modal_engine.buffer.protocol import TextBuffer

from .pending import PendingKeyBuffer

if TYPE_CHECKING:
    from modal_engine.keymaps.models import KeyEvent

OPERATORS = ("y", "d", "c")


class ModeKind(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    OPERATOR = "operator"


_HELP = {
    ModeKind.NORMAL: "type q to quit, type i to enter insert mode",
    ModeKind.INSERT: "type Esc to back to normal mode",
    ModeKind.VISUAL: "type y to yank, type d to delete, type Esc to back to normal mode",
    ModeKind.OPERATOR: "move cursor to apply operator",
}

_CURSOR_COLORS = {
    ModeKind.NORMAL: "default",
    ModeKind.INSERT: "bright_blue",
    ModeKind.VISUAL: "bright_yellow",
    ModeKind.OPERATOR: "bright_green",
}


@dataclass(frozen=True, slots=True)
class Mode:
    """The interpreter's current interpretation context.

    ``operator`` is set exactly when ``kind`` is :attr:`ModeKind.OPERATOR`.
    """

    kind: ModeKind
    operator: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is ModeKind.OPERATOR:
            if self.operator not in OPERATORS:
                raise ValueError(f"Unknown operator {self.operator!r}")
        elif self.operator is not None:
            raise ValueError(f"{self.kind.value} mode takes no operator")

    @classmethod
    def normal(cls) -> "Mode":
        return cls(ModeKind.NORMAL)

    @classmethod
    def insert(cls) -> "Mode":
        return cls(ModeKind.INSERT)

    @classmethod
    def visual(cls) -> "Mode":
        return cls(ModeKind.VISUAL)

    @classmethod
    def operator_pending(cls, operator: str) -> "Mode":
        return cls(ModeKind.OPERATOR, operator)

    @property
    def name(self) -> str:
        """Keymap mode this value resolves keys in."""

        return self.kind.value

    @property
    def is_operator_pending(self) -> bool:
        return self.kind is ModeKind.OPERATOR

    @property
    def label(self) -> str:
        if self.kind is ModeKind.OPERATOR:
            return f"OPERATOR({self.operator})"
        return self.kind.value.upper()

    @property
    def help(self) -> str:
        return _HELP[self.kind]

    @property
    def title(self) -> str:
        return f"{self.label} MODE ({self.help})"

    @property
    def cursor_color(self) -> str:
        return _CURSOR_COLORS[self.kind]

    def __str__(self) -> str:
        return self.label


class TransitionKind(str, Enum):
    NO_CHANGE = "no_change"
    ENTER_MODE = "enter_mode"
    DEFER_TO_PENDING = "defer_to_pending"
    QUIT = "quit"


@dataclass(frozen=True, slots=True)
class Transition:
    """What the host must do after one key event."""

    kind: TransitionKind
    mode: Optional[Mode] = None
    key: Optional[KeyEvent] = None

    @classmethod
    def no_change(cls) -> "Transition":
        return cls(TransitionKind.NO_CHANGE)

    @classmethod
    def enter(cls, mode: Mode) -> "Transition":
        return cls(TransitionKind.ENTER_MODE, mode=mode)

    @classmethod
    def defer(cls, key: KeyEvent) -> "Transition":
        return cls(TransitionKind.DEFER_TO_PENDING, key=key)

    @classmethod
    def quit(cls) -> "Transition":
        return cls(TransitionKind.QUIT)


class ModeBus:
    """Minimal event bus letting handlers publish structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class ModeContext:
    """Shared services every handler and action can access.

    ``mode`` is the mode the key being processed was received in; the
    controller refreshes it before each dispatch.
    """

    buffer: TextBuffer
    bus: ModeBus = field(default_factory=ModeBus)
    mode: Mode = field(default_factory=Mode.normal)
    pending: PendingKeyBuffer = field(default_factory=PendingKeyBuffer)
    extras: Dict[str, object] = field(default_factory=dict)


class ModeHandler:
    """Base class for the objects that interpret keys for one or more modes."""

    kinds: tuple[ModeKind, ...] = ()

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(self, previous: Optional[Mode]) -> None:  # pragma: no cover
        del previous

    def on_exit(self, next_mode: Mode) -> None:  # pragma: no cover
        del next_mode

    def handle_key(self, key: KeyEvent) -> Transition:  # pragma: no cover
        raise NotImplementedError
