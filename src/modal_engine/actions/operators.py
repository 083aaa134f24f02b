"""Operator entry points: ``y``/``d``/``c`` and their doubled forms."""

from __future__ import annotations

from typing import Callable, Optional

from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, Transition
from modal_engine.modes.operator_pipeline import OperatorCompositor

OperatorAction = Callable[[ModeContext, ResolutionMatch], Optional[Transition]]


def _compositor(context: ModeContext) -> OperatorCompositor:
    compositor = context.extras.get("operator_compositor")
    if not isinstance(compositor, OperatorCompositor):
        compositor = OperatorCompositor(context)
        context.extras["operator_compositor"] = compositor
    return compositor


def begin_operator(operator: str) -> OperatorAction:
    def run(context: ModeContext, match: ResolutionMatch) -> Transition:
        del match
        return _compositor(context).begin(operator)

    run.__name__ = f"begin_operator_{operator}"
    return run


def select_whole_line(context: ModeContext, match: ResolutionMatch) -> None:
    """Doubled operator: select the cursor line as the operator's span.

    Returns nothing so the handler completes the pending operator.
    """

    del match
    operator = context.mode.operator
    if operator is None:
        raise RuntimeError("select_whole_line requires a pending operator")
    _compositor(context).select_lines(operator)


def cancel_operator(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    return _compositor(context).cancel()


yank_operator = begin_operator("y")
delete_operator = begin_operator("d")
change_operator = begin_operator("c")


__all__ = [
    "begin_operator",
    "select_whole_line",
    "cancel_operator",
    "yank_operator",
    "delete_operator",
    "change_operator",
]
