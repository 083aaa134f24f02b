"""Actions dedicated to Visual mode selection management."""

from __future__ import annotations

from modal_engine.buffer.protocol import CursorMove
from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import Mode, ModeContext, Transition


def _emit_selection(context: ModeContext, event: str) -> None:
    buffer = context.buffer
    context.bus.emit(
        event,
        {"cursor": buffer.cursor, "selection": buffer.selection_range()},
    )


def enter_visual_mode(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.start_selection()
    _emit_selection(context, "visual.selection")
    return Transition.enter(Mode.visual())


def enter_visual_line_mode(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    buffer = context.buffer
    buffer.move_cursor(CursorMove.HEAD)
    buffer.start_selection()
    buffer.move_cursor(CursorMove.END)
    _emit_selection(context, "visual.selection")
    return Transition.enter(Mode.visual())


def cancel_selection(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    return Transition.enter(Mode.normal())


def yank_selection(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    buffer = context.buffer
    selection = buffer.selection_range()
    buffer.copy()
    if selection is not None:
        buffer.jump(*selection[0])
    _emit_selection(context, "visual.yank")
    return Transition.enter(Mode.normal())


def delete_selection(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cut()
    _emit_selection(context, "visual.delete")
    return Transition.enter(Mode.normal())


def change_selection(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cut()
    _emit_selection(context, "visual.change")
    return Transition.enter(Mode.insert())


__all__ = [
    "enter_visual_mode",
    "enter_visual_line_mode",
    "cancel_selection",
    "yank_selection",
    "delete_selection",
    "change_selection",
]
