"""Mode controller: one key event in, one transition out."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from modal_engine.buffer.protocol import TextBuffer
from modal_engine.keymaps.defaults import load_default_keymaps
from modal_engine.keymaps.models import NULL, KeyEvent
from modal_engine.keymaps.registry import KeymapRegistry
from modal_engine.keymaps.resolver import KeymapResolver
from modal_engine.runtime import telemetry

from .base_mode import (
    Mode,
    ModeBus,
    ModeContext,
    ModeHandler,
    ModeKind,
    Transition,
    TransitionKind,
)
from .cursor import constrain
from .insert_mode import InsertMode
from .normal_mode import NormalMode
from .pending import PendingKeyBuffer


class ModeController:
    """Owns the active mode and pending key, and dispatches key events.

    Every mode change clears the pending key. Entering Normal or Insert
    drops any leftover selection, and entering Normal pulls the cursor back
    onto a character.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        *,
        mode: Optional[Mode] = None,
        pending: Optional[PendingKeyBuffer] = None,
        bus: Optional[ModeBus] = None,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = ModeContext(
            buffer=buffer,
            bus=bus or ModeBus(),
            mode=mode or Mode.normal(),
            pending=pending if pending is not None else PendingKeyBuffer(),
        )
        self.logger = telemetry.get_logger("modal_engine.modes")
        if keymap_resolver is not None:
            self.keymap_resolver = keymap_resolver
            self.keymap_registry = keymap_resolver.registry
        else:
            self.keymap_registry = keymap_registry or KeymapRegistry(
                logger_name="modal_engine.keymaps"
            )
            if load_defaults and keymap_registry is None:
                load_default_keymaps(self.keymap_registry)
            self.keymap_resolver = KeymapResolver(
                self.keymap_registry, logger_name="modal_engine.keymaps"
            )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("mode_controller", self)

        self._handlers: Dict[ModeKind, ModeHandler] = {}
        for handler in (NormalMode(self.context), InsertMode(self.context)):
            for kind in handler.kinds:
                self._handlers[kind] = handler

    @property
    def mode(self) -> Mode:
        return self.context.mode

    @property
    def pending(self) -> PendingKeyBuffer:
        return self.context.pending

    @property
    def buffer(self) -> TextBuffer:
        return self.context.buffer

    @property
    def bus(self) -> ModeBus:
        return self.context.bus

    def handle(self, key: KeyEvent) -> Transition:
        if key.key == NULL:
            return Transition.no_change()

        mode = self.context.mode
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"key": key.token, "mode": mode.label},
        ) as handle:
            transition = self._handlers[mode.kind].handle_key(key)
            handle.add_metadata("transition", transition.kind.value)
        self._apply(transition)
        return transition

    def switch_mode(self, mode: Mode) -> None:
        previous = self.context.mode
        buffer = self.context.buffer
        self.context.pending.clear()
        if mode.kind in (ModeKind.NORMAL, ModeKind.INSERT):
            buffer.cancel_selection()
        if mode.kind is ModeKind.NORMAL:
            constrain(buffer, mode)
        if mode == previous:
            return

        self._handlers[previous.kind].on_exit(mode)
        self.context.mode = mode
        self._handlers[mode.kind].on_enter(previous)
        telemetry.record_event(
            "mode.switch", data={"from": previous.label, "to": mode.label}
        )
        self.context.bus.emit("mode.switch", {"previous": previous, "mode": mode})

    def _apply(self, transition: Transition) -> None:
        if transition.kind is TransitionKind.DEFER_TO_PENDING:
            assert transition.key is not None
            self.context.pending.hold(transition.key)
            return
        self.context.pending.clear()
        if transition.kind is TransitionKind.ENTER_MODE and transition.mode:
            self.switch_mode(transition.mode)


@lru_cache(maxsize=1)
def default_keymap_resolver() -> KeymapResolver:
    registry = KeymapRegistry(logger_name="modal_engine.keymaps")
    load_default_keymaps(registry)
    return KeymapResolver(registry, logger_name="modal_engine.keymaps")


def transition(
    mode: Mode,
    pending: Optional[KeyEvent],
    key: KeyEvent,
    buffer: TextBuffer,
    *,
    keymap_resolver: KeymapResolver | None = None,
) -> tuple[Transition, Optional[KeyEvent]]:
    """Interpret one key without keeping any state between calls.

    Returns the transition and the pending key that should accompany the
    next call. ``buffer`` is edited in place.
    """

    controller = ModeController(
        buffer,
        mode=mode,
        pending=PendingKeyBuffer(pending),
        keymap_resolver=keymap_resolver or default_keymap_resolver(),
    )
    result = controller.handle(key)
    return result, controller.pending.key


__all__ = ["ModeController", "default_keymap_resolver", "transition"]
