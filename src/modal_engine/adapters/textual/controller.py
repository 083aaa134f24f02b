"""Minimal Textual adapter that wires ModeController events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from modal_engine.buffer import BufferMirror
from modal_engine.keymaps.models import (
    BACKSPACE,
    DELETE,
    DOWN,
    END,
    ENTER,
    ESC,
    HOME,
    LEFT,
    RIGHT,
    TAB,
    UP,
    KeyEvent,
)
from modal_engine.modes import Mode, Transition, TransitionKind
from modal_engine.modes.controller import ModeController


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


_TEXTUAL_NAMED_KEYS = {
    "escape": ESC,
    "enter": ENTER,
    "tab": TAB,
    "backspace": BACKSPACE,
    "delete": DELETE,
    "left": LEFT,
    "right": RIGHT,
    "up": UP,
    "down": DOWN,
    "home": HOME,
    "end": END,
}


def key_event_from_textual(key: str, character: Optional[str] = None) -> Optional[KeyEvent]:
    """Translate Textual's ``key``/``character`` pair into a :class:`KeyEvent`.

    Shift is folded into the character for printable keys, so ``G`` arrives
    as ``KeyEvent("G")``. Returns ``None`` for keys the engine has no name for.
    """

    *modifiers, name = key.split("+")
    flags = set(modifiers)
    ctrl = "ctrl" in flags
    alt = "alt" in flags or "meta" in flags
    shift = "shift" in flags

    if name in _TEXTUAL_NAMED_KEYS:
        return KeyEvent(_TEXTUAL_NAMED_KEYS[name], ctrl=ctrl, alt=alt, shift=shift)
    if (
        character
        and len(character) == 1
        and character.isprintable()
        and not (ctrl or alt)
    ):
        return KeyEvent(character)
    if len(name) == 1:
        return KeyEvent(name, ctrl=ctrl, alt=alt)
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    update_title: Callable[[str], None] = _noop
    update_cursor_style: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    request_quit: Callable[[], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualVimAdapter:
    """Bridges ModeController + bus events to a Textual-friendly surface."""

    def __init__(self, controller: ModeController, hooks: TextualUIHooks) -> None:
        self.controller = controller
        self.hooks = hooks
        self._subscribe_events()
        self._refresh_buffer()
        self._refresh_mode(controller.mode)

    def handle_textual_key(
        self, key: str, *, character: Optional[str] = None
    ) -> Optional[Transition]:
        """Translate a Textual key event and dispatch it."""

        event = key_event_from_textual(key, character)
        if event is None:
            self._log_state("ignored ->", key=key, character=character)
            return None
        return self.handle_key(event)

    def handle_key(self, key: KeyEvent) -> Transition:
        self._log_state("key ->", key=key.token)
        transition = self.controller.handle(key)
        self._log_state("transition <-", kind=transition.kind.value)
        if transition.kind is TransitionKind.QUIT:
            self.hooks.request_quit()
            return transition
        self._refresh_buffer()
        self._refresh_status()
        return transition

    def _subscribe_events(self) -> None:
        bus = self.controller.bus
        bus.subscribe("mode.switch", self._on_mode_switch)
        for event in (
            "visual.selection",
            "visual.yank",
            "visual.delete",
            "visual.change",
            "operator.complete",
            "register.paste",
            "editor.quit",
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _on_mode_switch(self, payload: object | None) -> None:
        self._handle_event("mode.switch", payload)
        if isinstance(payload, dict) and isinstance(payload.get("mode"), Mode):
            self._refresh_mode(payload["mode"])

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _refresh_mode(self, mode: Mode) -> None:
        self.hooks.update_title(mode.title)
        self.hooks.update_cursor_style(mode.cursor_color)
        self._refresh_status()

    def _refresh_status(self) -> None:
        mode = self.controller.mode
        pending = self.controller.pending.key
        status = mode.label if pending is None else f"{mode.label} {pending.token}"
        self.hooks.update_status(status)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.mirror())

    def mirror(self) -> BufferMirror:
        buffer = self.controller.buffer
        return BufferMirror(
            lines=tuple(buffer.lines()),
            cursor=buffer.cursor,
            selection=buffer.selection_range(),
            attributes={"mode": self.controller.mode.name},
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.controller.buffer
        pending = self.controller.pending.key
        return {
            "mode": self.controller.mode.label,
            "cursor": buffer.cursor,
            "selection": buffer.selection_range(),
            "pending": pending.token if pending else None,
        }


__all__ = ["TextualVimAdapter", "TextualUIHooks", "key_event_from_textual"]
