"""Command-table handler shared by Normal, Visual and operator-pending modes."""

from __future__ import annotations

from modal_engine.keymaps.models import KeyEvent
from modal_engine.runtime import telemetry

from .base_mode import ModeContext, ModeHandler, ModeKind, Transition
from .keymap_helpers import execute_match, mode_flags, require_keymap_resolver
from .operator_pipeline import OperatorCompositor


class NormalMode(ModeHandler):
    """Looks keys up in the active mode's command table.

    In operator-pending mode any command that does not switch modes itself
    is treated as the motion and completes the operator. A key that matches
    nothing there cancels the operator unless it opens a two-key command.
    Elsewhere unmatched keys are handed back so they can be held as pending.
    """

    kinds = (ModeKind.NORMAL, ModeKind.VISUAL, ModeKind.OPERATOR)

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("modal_engine.modes.normal")
        self._resolver = require_keymap_resolver(context)
        # shared with the operator actions, which look it up in extras
        self.compositor = context.extras.setdefault(
            "operator_compositor", OperatorCompositor(context)
        )

    def handle_key(self, key: KeyEvent) -> Transition:
        mode = self.context.mode
        result = self._resolver.resolve(
            mode.name,
            key,
            pending=self.context.pending,
            context=mode_flags(mode),
        )

        if result.status == "miss" or result.match is None:
            if mode.is_operator_pending and not result.is_prefix:
                return self.compositor.cancel()
            return Transition.defer(key)

        outcome = execute_match(self.context, result.match)
        if outcome is not None:
            return outcome
        if mode.is_operator_pending:
            assert mode.operator is not None
            return self.compositor.complete(mode.operator)
        return Transition.no_change()


__all__ = ["NormalMode"]
