"""Register paste placement.

Line-wise text (anything holding a line separator) is spliced in as whole
lines below or above the cursor line. Character-wise text goes right after
or at the cursor. Either way the paste is a single undo step.
"""

from __future__ import annotations

from modal_engine.buffer.protocol import CursorMove, TextBuffer
from modal_engine.buffer.registers import YankRegister
from modal_engine.keymaps.resolver import ResolutionMatch
from modal_engine.modes.base_mode import Mode, ModeContext, Transition


def paste_below(buffer: TextBuffer) -> bool:
    register = YankRegister(buffer.yank_text())
    if not register.text:
        return False

    if register.is_linewise:
        with buffer.transaction("paste_below"):
            buffer.move_cursor(CursorMove.END)
            buffer.insert_newline()
            row = buffer.cursor[0]
            buffer.insert_text(register.line_block())
        buffer.jump(row, 0)
        return True

    with buffer.transaction("paste_below"):
        row, col = buffer.cursor
        if col < len(buffer.lines()[row]):
            buffer.move_cursor(CursorMove.FORWARD)
        return buffer.paste()


def paste_above(buffer: TextBuffer) -> bool:
    register = YankRegister(buffer.yank_text())
    if not register.text:
        return False

    if register.is_linewise:
        with buffer.transaction("paste_above"):
            buffer.move_cursor(CursorMove.HEAD)
            row = buffer.cursor[0]
            buffer.insert_text(register.line_block())
            buffer.insert_newline()
        buffer.jump(row, 0)
        return True

    with buffer.transaction("paste_above"):
        return buffer.paste()


def paste_after_cursor(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    if paste_below(context.buffer):
        context.bus.emit("register.paste", {"placement": "below"})
    return Transition.enter(Mode.normal())


def paste_before_cursor(context: ModeContext, match: ResolutionMatch) -> Transition:
    del match
    context.buffer.cancel_selection()
    if paste_above(context.buffer):
        context.bus.emit("register.paste", {"placement": "above"})
    return Transition.enter(Mode.normal())


__all__ = [
    "paste_below",
    "paste_above",
    "paste_after_cursor",
    "paste_before_cursor",
]
