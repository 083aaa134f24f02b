"""Built-in keymaps that seed each mode with sensible defaults."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from modal_engine.actions import core as core_actions
from modal_engine.actions import editing as editing_actions
from modal_engine.actions import motions as motion_actions
from modal_engine.actions import operators as operator_actions
from modal_engine.actions import paste as paste_actions
from modal_engine.actions import visual as visual_actions

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

COMMAND_TABLE_MODES = ("normal", "visual", "operator")

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef("motion.left", motion_actions.move_left, "Move left"),
    ActionRef("motion.down", motion_actions.move_down, "Move down"),
    ActionRef("motion.up", motion_actions.move_up, "Move up"),
    ActionRef("motion.right", motion_actions.move_right, "Move right"),
    ActionRef("motion.word_forward", motion_actions.word_forward, "Next word start"),
    ActionRef("motion.word_end", motion_actions.word_end, "Word end"),
    ActionRef("motion.word_back", motion_actions.word_back, "Previous word start"),
    ActionRef("motion.line_head", motion_actions.line_head, "Line start"),
    ActionRef("motion.line_end", motion_actions.line_end, "Line end"),
    ActionRef("motion.buffer_top", motion_actions.buffer_top, "First line"),
    ActionRef("motion.buffer_bottom", motion_actions.buffer_bottom, "Last line"),
    ActionRef(
        "scroll.line_down", motion_actions.scroll_line_down, "Scroll one line down"
    ),
    ActionRef("scroll.line_up", motion_actions.scroll_line_up, "Scroll one line up"),
    ActionRef(
        "scroll.half_page_down",
        motion_actions.scroll_half_page_down,
        "Scroll half a page down",
    ),
    ActionRef(
        "scroll.half_page_up",
        motion_actions.scroll_half_page_up,
        "Scroll half a page up",
    ),
    ActionRef(
        "scroll.page_down", motion_actions.scroll_page_down, "Scroll a page down"
    ),
    ActionRef("scroll.page_up", motion_actions.scroll_page_up, "Scroll a page up"),
    ActionRef(
        "edit.delete_to_line_end",
        editing_actions.delete_to_line_end,
        "Delete to end of line",
    ),
    ActionRef(
        "edit.change_to_line_end",
        editing_actions.change_to_line_end,
        "Change to end of line",
    ),
    ActionRef("edit.delete_char", editing_actions.delete_char, "Delete character"),
    ActionRef("edit.undo", editing_actions.undo, "Undo"),
    ActionRef("edit.redo", editing_actions.redo, "Redo"),
    ActionRef(
        "register.paste_below",
        paste_actions.paste_after_cursor,
        "Paste after the cursor or below the line",
    ),
    ActionRef(
        "register.paste_above",
        paste_actions.paste_before_cursor,
        "Paste at the cursor or above the line",
    ),
    ActionRef(
        "core.enter_insert", core_actions.enter_insert_mode, "Enter insert mode"
    ),
    ActionRef(
        "core.append", core_actions.append_after_cursor, "Append after the cursor"
    ),
    ActionRef(
        "core.append_line_end",
        core_actions.append_at_line_end,
        "Append at end of line",
    ),
    ActionRef(
        "core.insert_line_start",
        core_actions.insert_at_line_start,
        "Insert at start of line",
    ),
    ActionRef("core.open_below", core_actions.open_line_below, "Open line below"),
    ActionRef("core.open_above", core_actions.open_line_above, "Open line above"),
    ActionRef(
        "core.exit_to_normal",
        core_actions.exit_to_normal_mode,
        "Return to normal mode",
    ),
    ActionRef("core.quit", core_actions.quit_editor, "Quit"),
    ActionRef(
        "visual.enter", visual_actions.enter_visual_mode, "Enter visual mode"
    ),
    ActionRef(
        "visual.enter_line",
        visual_actions.enter_visual_line_mode,
        "Select the current line",
    ),
    ActionRef(
        "visual.cancel", visual_actions.cancel_selection, "Leave visual mode"
    ),
    ActionRef(
        "visual.yank_selection",
        visual_actions.yank_selection,
        "Yank current visual selection",
    ),
    ActionRef(
        "visual.delete_selection",
        visual_actions.delete_selection,
        "Delete current selection",
    ),
    ActionRef(
        "visual.change_selection",
        visual_actions.change_selection,
        "Change current selection",
    ),
    ActionRef("operator.yank", operator_actions.yank_operator, "Yank operator"),
    ActionRef("operator.delete", operator_actions.delete_operator, "Delete operator"),
    ActionRef("operator.change", operator_actions.change_operator, "Change operator"),
    ActionRef(
        "operator.whole_line",
        operator_actions.select_whole_line,
        "Apply the pending operator to the whole line",
    ),
    ActionRef(
        "operator.cancel", operator_actions.cancel_operator, "Cancel the operator"
    ),
)

# (keys, action id, description) available in every command-table mode.
SHARED_COMMANDS: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("h",), "motion.left", "Move left"),
    (("j",), "motion.down", "Move down"),
    (("k",), "motion.up", "Move up"),
    (("l",), "motion.right", "Move right"),
    (("w",), "motion.word_forward", "Next word start"),
    (("e",), "motion.word_end", "Word end"),
    (("b",), "motion.word_back", "Previous word start"),
    (("^",), "motion.line_head", "Line start"),
    (("$",), "motion.line_end", "Line end"),
    (("g", "g"), "motion.buffer_top", "First line"),
    (("G",), "motion.buffer_bottom", "Last line"),
    (("ctrl+e",), "scroll.line_down", "Scroll one line down"),
    (("ctrl+y",), "scroll.line_up", "Scroll one line up"),
    (("ctrl+d",), "scroll.half_page_down", "Scroll half a page down"),
    (("ctrl+u",), "scroll.half_page_up", "Scroll half a page up"),
    (("ctrl+f",), "scroll.page_down", "Scroll a page down"),
    (("ctrl+b",), "scroll.page_up", "Scroll a page up"),
    (("D",), "edit.delete_to_line_end", "Delete to end of line"),
    (("C",), "edit.change_to_line_end", "Change to end of line"),
    (("x",), "edit.delete_char", "Delete character"),
    (("u",), "edit.undo", "Undo"),
    (("ctrl+r",), "edit.redo", "Redo"),
    (("p",), "register.paste_below", "Paste below"),
    (("P",), "register.paste_above", "Paste above"),
    (("i",), "core.enter_insert", "Enter insert mode"),
    (("a",), "core.append", "Append after the cursor"),
    (("A",), "core.append_line_end", "Append at end of line"),
    (("I",), "core.insert_line_start", "Insert at start of line"),
    (("o",), "core.open_below", "Open line below"),
    (("O",), "core.open_above", "Open line above"),
    (("q",), "core.quit", "Quit"),
)


def _shared_bindings() -> tuple[Binding, ...]:
    return tuple(
        Binding(
            id=f"{mode}.{action_id}",
            mode=mode,
            sequence=KeySequence.from_strings(*keys),
            action_id=action_id,
            description=description,
        )
        for mode in COMMAND_TABLE_MODES
        for keys, action_id, description in SHARED_COMMANDS
    )


def _binding(
    binding_id: str,
    mode: str,
    key: str,
    action_id: str,
    description: str,
    *,
    when: Sequence[str] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(key),
        action_id=action_id,
        description=description,
        when=tuple(when),
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = _shared_bindings() + (
    _binding("normal.visual", "normal", "v", "visual.enter", "Enter visual mode"),
    _binding(
        "normal.visual_line", "normal", "V", "visual.enter_line", "Select line"
    ),
    _binding("normal.operator_y", "normal", "y", "operator.yank", "Yank operator"),
    _binding("normal.operator_d", "normal", "d", "operator.delete", "Delete operator"),
    _binding("normal.operator_c", "normal", "c", "operator.change", "Change operator"),
    _binding("visual.exit_escape", "visual", "ESC", "visual.cancel", "Leave visual"),
    _binding("visual.exit_v", "visual", "v", "visual.cancel", "Leave visual"),
    _binding(
        "visual.yank_selection", "visual", "y", "visual.yank_selection", "Yank"
    ),
    _binding(
        "visual.delete_selection", "visual", "d", "visual.delete_selection", "Delete"
    ),
    _binding(
        "visual.change_selection", "visual", "c", "visual.change_selection", "Change"
    ),
    _binding(
        "operator.line_y",
        "operator",
        "y",
        "operator.whole_line",
        "Yank the current line",
        when=("operator_y",),
    ),
    _binding(
        "operator.line_d",
        "operator",
        "d",
        "operator.whole_line",
        "Delete the current line",
        when=("operator_d",),
    ),
    _binding(
        "operator.line_c",
        "operator",
        "c",
        "operator.whole_line",
        "Change the current line",
        when=("operator_c",),
    ),
    _binding(
        "operator.cancel_escape", "operator", "ESC", "operator.cancel", "Cancel"
    ),
    _binding(
        "insert.exit_escape", "insert", "ESC", "core.exit_to_normal", "Leave insert"
    ),
    _binding(
        "insert.exit_ctrl_c",
        "insert",
        "ctrl+c",
        "core.exit_to_normal",
        "Leave insert",
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode.

    Parameters
    ----------
    registry:
        Registry receiving the defaults.
    replace:
        Overwrite existing actions and conflicting bindings instead of raising.
    extra_bindings:
        Additional bindings registered after the defaults.
    include_actions / exclude_actions / include_bindings / exclude_bindings:
        Id filters applied to the defaults. A binding whose action was
        filtered out must be filtered out as well.
    per_mode_overrides:
        Bindings keyed by mode that replace whatever they conflict with.
    """

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if per_mode_overrides:
        for mode, bindings in per_mode_overrides.items():
            for binding in bindings:
                if binding.mode != mode:
                    raise ValueError(
                        f"Override binding '{binding.id}' must target mode '{mode}'"
                    )
                registry.register_binding(binding, replace=True)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = [
    "COMMAND_TABLE_MODES",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "SHARED_COMMANDS",
    "load_default_keymaps",
]
