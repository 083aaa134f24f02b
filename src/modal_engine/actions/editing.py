"""Single-key edits: D, C, x, undo and redo."""

from __future__ import annotations

from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import Mode, ModeContext, Transition


def delete_to_line_end(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    context.buffer.delete_line_by_end()
    return Transition.enter(Mode.normal())


def change_to_line_end(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    context.buffer.delete_line_by_end()
    return Transition.enter(Mode.insert())


def delete_char(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    buffer = context.buffer
    buffer.cancel_selection()
    row, col = buffer.cursor
    # Never join lines from Normal mode.
    if col < len(buffer.lines()[row]):
        buffer.delete_next_char()
    return Transition.enter(Mode.normal())


def undo(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    context.buffer.undo()
    return Transition.enter(Mode.normal())


def redo(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    context.buffer.redo()
    return Transition.enter(Mode.normal())


__all__ = [
    "delete_to_line_end",
    "change_to_line_end",
    "delete_char",
    "undo",
    "redo",
]
