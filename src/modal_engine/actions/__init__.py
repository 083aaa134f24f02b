"""High-level editing verbs reused across modes."""

from .core import (
    append_after_cursor,
    append_at_line_end,
    enter_insert_mode,
    exit_to_normal_mode,
    insert_at_line_start,
    open_line_above,
    open_line_below,
    quit_editor,
)
from .editing import (
    change_to_line_end,
    delete_char,
    delete_to_line_end,
    redo,
    undo,
)
from .motions import (
    buffer_bottom,
    buffer_top,
    line_end,
    line_head,
    move_down,
    move_left,
    move_right,
    move_up,
    scroll_half_page_down,
    scroll_half_page_up,
    scroll_line_down,
    scroll_line_up,
    scroll_page_down,
    scroll_page_up,
    word_back,
    word_end,
    word_forward,
)
from .operators import (
    cancel_operator,
    change_operator,
    delete_operator,
    select_whole_line,
    yank_operator,
)
from .paste import paste_above, paste_after_cursor, paste_before_cursor, paste_below
from .visual import (
    cancel_selection,
    change_selection,
    delete_selection,
    enter_visual_line_mode,
    enter_visual_mode,
    yank_selection,
)

__all__ = [
    "append_after_cursor",
    "append_at_line_end",
    "enter_insert_mode",
    "exit_to_normal_mode",
    "insert_at_line_start",
    "open_line_above",
    "open_line_below",
    "quit_editor",
    "change_to_line_end",
    "delete_char",
    "delete_to_line_end",
    "redo",
    "undo",
    "buffer_bottom",
    "buffer_top",
    "line_end",
    "line_head",
    "move_down",
    "move_left",
    "move_right",
    "move_up",
    "scroll_half_page_down",
    "scroll_half_page_up",
    "scroll_line_down",
    "scroll_line_up",
    "scroll_page_down",
    "scroll_page_up",
    "word_back",
    "word_end",
    "word_forward",
    "cancel_operator",
    "change_operator",
    "delete_operator",
    "select_whole_line",
    "yank_operator",
    "paste_above",
    "paste_after_cursor",
    "paste_before_cursor",
    "paste_below",
    "cancel_selection",
    "change_selection",
    "delete_selection",
    "enter_visual_line_mode",
    "enter_visual_mode",
    "yank_selection",
]
