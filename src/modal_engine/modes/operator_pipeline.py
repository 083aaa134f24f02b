"""Operator composition: turn ``operator + motion`` into one edit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from modal_engine.buffer.protocol import CursorMove, TextBuffer
from modal_engine.buffer.state import Cursor, Selection
from modal_engine.runtime import telemetry

from .base_mode import OPERATORS, Mode, ModeContext, Transition
from .cursor import constrain

# Doubled on the last line, these take the separator before the line with it.
LINE_CAPTURING_OPERATORS = ("y", "d")


@dataclass(frozen=True, slots=True)
class OperatorOutcome:
    """What one completed operator did to the buffer."""

    operator: str
    selection: Optional[Selection]
    applied: bool
    register: str


class OperatorCompositor:
    """Applies ``y``/``d``/``c`` to the span between anchor and cursor.

    Entering an operator drops an anchor at the cursor; the motion that
    follows moves the cursor; completing the operator acts on the span in
    between and picks the follow-up mode.
    """

    def __init__(self, context: ModeContext) -> None:
        self.context = context
        self._line_start: Optional[Cursor] = None

    @property
    def buffer(self) -> TextBuffer:
        return self.context.buffer

    def begin(self, operator: str) -> Transition:
        _check_operator(operator)
        self.buffer.start_selection()
        return Transition.enter(Mode.operator_pending(operator))

    def select_lines(self, operator: str) -> None:
        """Select the whole current line for a doubled operator (``dd``).

        The selection runs from column 0 to the start of the next line. On
        the last line there is no next line, so the selection ends at the end
        of the line. For ``yy`` and ``dd`` it then starts at the end of the
        previous line: the captured text stays line-wise and ``dd`` removes
        the line itself. ``cc`` only empties the line, leaving it to type in.
        """

        _check_operator(operator)
        buffer = self.buffer
        buffer.move_cursor(CursorMove.HEAD)
        buffer.start_selection()
        anchor = buffer.cursor
        self._line_start = anchor
        buffer.move_cursor(CursorMove.DOWN)
        if buffer.cursor != anchor:
            return

        buffer.move_cursor(CursorMove.END)
        row = anchor[0]
        if operator in LINE_CAPTURING_OPERATORS and row > 0:
            lines = buffer.lines()
            buffer.jump(row - 1, len(lines[row - 1]))
            buffer.start_selection()
            buffer.jump(row, len(lines[row]))

    def complete(self, operator: str) -> Transition:
        _check_operator(operator)
        buffer = self.buffer
        selection = buffer.selection_range()
        line_start, self._line_start = self._line_start, None
        with telemetry.span(
            f"operator::{operator}",
            component=True,
            metadata={"operator": operator, "selection": str(selection)},
        ) as handle:
            if operator == "y":
                applied = buffer.copy()
                if line_start is not None:
                    buffer.jump(*line_start)
                elif selection is not None:
                    buffer.jump(*selection[0])
            else:
                applied = buffer.cut()
            handle.add_metadata("applied", str(applied))

        outcome = OperatorOutcome(
            operator=operator,
            selection=selection,
            applied=applied,
            register=buffer.yank_text(),
        )
        self.context.bus.emit("operator.complete", outcome)

        if operator == "c":
            return Transition.enter(Mode.insert())
        constrain(buffer)
        return Transition.enter(Mode.normal())

    def cancel(self) -> Transition:
        self._line_start = None
        self.buffer.cancel_selection()
        return Transition.enter(Mode.normal())


def _check_operator(operator: str) -> None:
    if operator not in OPERATORS:
        raise ValueError(f"Unknown operator {operator!r}")


__all__ = ["LINE_CAPTURING_OPERATORS", "OperatorCompositor", "OperatorOutcome"]
