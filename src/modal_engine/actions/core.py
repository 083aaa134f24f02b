"""Core action implementations shared across modes."""

from __future__ import annotations

from modal_engine.buffer.protocol import CursorMove
from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import Mode, ModeContext, Transition


def enter_insert_mode(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    return Transition.enter(Mode.insert())


def append_after_cursor(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    buffer = context.buffer
    buffer.cancel_selection()
    row, col = buffer.cursor
    # Forward would wrap onto the next line from the end of this one.
    if col < len(buffer.lines()[row]):
        buffer.move_cursor(CursorMove.FORWARD)
    return Transition.enter(Mode.insert())


def append_at_line_end(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    context.buffer.move_cursor(CursorMove.END)
    return Transition.enter(Mode.insert())


def insert_at_line_start(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    context.buffer.move_cursor(CursorMove.HEAD)
    return Transition.enter(Mode.insert())


def open_line_below(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    buffer = context.buffer
    buffer.cancel_selection()
    buffer.move_cursor(CursorMove.END)
    buffer.insert_newline()
    return Transition.enter(Mode.insert())


def open_line_above(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    buffer = context.buffer
    buffer.cancel_selection()
    buffer.move_cursor(CursorMove.HEAD)
    buffer.insert_newline()
    buffer.move_cursor(CursorMove.UP)
    return Transition.enter(Mode.insert())


def exit_to_normal_mode(context: ModeContext, match: ResolutionMatch) -> Transition:
    del context, match
    return Transition.enter(Mode.normal())


def quit_editor(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.bus.emit("editor.quit", context.mode)
    return Transition.quit()


__all__ = [
    "enter_insert_mode",
    "append_after_cursor",
    "append_at_line_end",
    "insert_at_line_start",
    "open_line_below",
    "open_line_above",
    "exit_to_normal_mode",
    "quit_editor",
]
