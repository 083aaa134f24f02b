"""Cursor motions and scrolling.

Motions return nothing: in operator-pending mode the handler treats them as
the span for the pending operator, elsewhere the key is simply consumed.
"""

from __future__ import annotations

from typing import Callable, Union

from modal_engine.buffer.protocol import CursorMove, Scrolling
from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import ModeContext, ModeKind
from modal_engine.modes.cursor import constrain

MotionAction = Callable[[ModeContext, ResolutionMatch], None]


def settle_cursor(context: ModeContext) -> None:
    """Normalize after a motion unless an operator is still waiting on it."""

    if context.mode.kind in (ModeKind.NORMAL, ModeKind.VISUAL):
        constrain(context.buffer, context.mode)


def motion(move: CursorMove) -> MotionAction:
    def run(context: ModeContext, match: ResolutionMatch) -> None:
        del match
        context.buffer.move_cursor(move)
        settle_cursor(context)

    run.__name__ = f"move_{move.value}"
    return run


def scroll(amount: Union[int, Scrolling]) -> MotionAction:
    def run(context: ModeContext, match: ResolutionMatch) -> None:
        del match
        context.buffer.scroll(amount)
        settle_cursor(context)

    label = amount.value if isinstance(amount, Scrolling) else f"lines_{amount}"
    run.__name__ = f"scroll_{label}"
    return run


def word_end(context: ModeContext, match: ResolutionMatch) -> None:
    """Move to the end of the word; an operator also takes that last character."""

    del match
    buffer = context.buffer
    buffer.move_cursor(CursorMove.WORD_END)
    if context.mode.is_operator_pending:
        buffer.move_cursor(CursorMove.FORWARD)
    settle_cursor(context)


def move_left(context: ModeContext, match: ResolutionMatch) -> None:
    del match
    # h and l stay on the current line.
    if context.buffer.cursor[1] > 0:
        context.buffer.move_cursor(CursorMove.BACK)
    settle_cursor(context)


def move_right(context: ModeContext, match: ResolutionMatch) -> None:
    del match
    buffer = context.buffer
    row, col = buffer.cursor
    if col < len(buffer.lines()[row]):
        buffer.move_cursor(CursorMove.FORWARD)
    settle_cursor(context)


move_down = motion(CursorMove.DOWN)
move_up = motion(CursorMove.UP)
word_forward = motion(CursorMove.WORD_FORWARD)
word_back = motion(CursorMove.WORD_BACK)
line_head = motion(CursorMove.HEAD)
line_end = motion(CursorMove.END)
buffer_top = motion(CursorMove.TOP)
buffer_bottom = motion(CursorMove.BOTTOM)

scroll_line_down = scroll(1)
scroll_line_up = scroll(-1)
scroll_half_page_down = scroll(Scrolling.HALF_PAGE_DOWN)
scroll_half_page_up = scroll(Scrolling.HALF_PAGE_UP)
scroll_page_down = scroll(Scrolling.PAGE_DOWN)
scroll_page_up = scroll(Scrolling.PAGE_UP)


__all__ = [
    "motion",
    "scroll",
    "settle_cursor",
    "word_end",
    "move_left",
    "move_down",
    "move_up",
    "move_right",
    "word_forward",
    "word_back",
    "line_head",
    "line_end",
    "buffer_top",
    "buffer_bottom",
    "scroll_line_down",
    "scroll_line_up",
    "scroll_half_page_down",
    "scroll_half_page_up",
    "scroll_page_down",
    "scroll_page_up",
]
