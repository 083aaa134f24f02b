"""Insert mode: a small exit table in front of the buffer's own text input."""

from __future__ import annotations

from modal_engine.keymaps.models import KeyEvent
from modal_engine.runtime import telemetry

from .base_mode import Mode, ModeContext, ModeHandler, ModeKind, Transition
from .keymap_helpers import execute_match, require_keymap_resolver


class InsertMode(ModeHandler):
    kinds = (ModeKind.INSERT,)

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("modal_engine.modes.insert")
        self._resolver = require_keymap_resolver(context)

    def handle_key(self, key: KeyEvent) -> Transition:
        result = self._resolver.resolve(ModeKind.INSERT.value, key)
        if result.status == "match" and result.match:
            outcome = execute_match(self.context, result.match)
            if outcome is not None:
                return outcome

        self.context.buffer.input(key)
        return Transition.enter(Mode.insert())


__all__ = ["InsertMode"]
