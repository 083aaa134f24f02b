"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from typing import Mapping, Optional

from modal_engine.keymaps.resolver import KeymapResolver, ResolutionMatch
from modal_engine.runtime import telemetry

from .base_mode import Mode, ModeContext, Transition


def require_keymap_resolver(context: ModeContext) -> KeymapResolver:
    resolver = context.extras.get("keymap_resolver")
    if not isinstance(resolver, KeymapResolver):
        raise RuntimeError("ModeContext.extras missing 'keymap_resolver'")
    return resolver


def mode_flags(mode: Mode) -> Mapping[str, bool]:
    """When-clause flags describing ``mode``; ``operator_d`` while in ``d``."""

    if mode.operator is None:
        return {}
    return {f"operator_{mode.operator}": True}


def execute_match(context: ModeContext, match: ResolutionMatch) -> Optional[Transition]:
    with telemetry.span(
        "keymaps::execute",
        component="keymaps",
        metadata={"binding_id": match.binding.id, "action": match.action.id},
    ):
        outcome = match.action(context, match)

    if isinstance(outcome, Transition):
        return outcome
    return None


__all__ = [
    "execute_match",
    "mode_flags",
    "require_keymap_resolver",
]
