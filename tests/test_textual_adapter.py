from __future__ import annotations

from typing import List

import pytest

from modal_engine.adapters.textual import (
    TextualUIHooks,
    TextualVimAdapter,
    key_event_from_textual,
)
from modal_engine.buffer import Buffer
from modal_engine.keymaps import KeyEvent
from modal_engine.modes import TransitionKind
from modal_engine.modes.controller import ModeController


def make_controller(*lines: str) -> ModeController:
    return ModeController(Buffer.from_lines(lines or ("",)))


@pytest.mark.parametrize(
    ("key", "character", "expected"),
    [
        ("i", "i", KeyEvent("i")),
        ("G", "G", KeyEvent("G")),
        ("dollar_sign", "$", KeyEvent("$")),
        ("circumflex_accent", "^", KeyEvent("^")),
        ("space", " ", KeyEvent(" ")),
        ("ctrl+r", "\x12", KeyEvent("r", ctrl=True)),
        ("escape", None, KeyEvent("ESC")),
        ("enter", "\r", KeyEvent("ENTER")),
        ("shift+tab", None, KeyEvent("TAB", shift=True)),
        ("f1", None, None),
    ],
)
def test_key_event_from_textual(key: str, character: str | None, expected) -> None:
    assert key_event_from_textual(key, character) == expected


def test_adapter_updates_buffer_status_and_title() -> None:
    controller = make_controller("")
    updates: List[str] = []
    statuses: List[str] = []
    titles: List[str] = []
    cursor_styles: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: updates.append(mirror.text),
        update_status=statuses.append,
        update_title=titles.append,
        update_cursor_style=cursor_styles.append,
    )
    adapter = TextualVimAdapter(controller, hooks)

    adapter.handle_textual_key("i", character="i")
    adapter.handle_textual_key("h", character="h")
    adapter.handle_textual_key("escape")

    assert updates[-1] == "h"
    assert statuses[-1] == "NORMAL"
    assert "INSERT" in statuses
    assert titles[0].startswith("NORMAL MODE")
    assert any(title.startswith("INSERT MODE") for title in titles)
    assert cursor_styles[-1] == controller.mode.cursor_color


def test_adapter_shows_pending_key_in_status() -> None:
    controller = make_controller("abc")
    statuses: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda mirror: None, update_status=statuses.append)
    adapter = TextualVimAdapter(controller, hooks)

    adapter.handle_textual_key("g", character="g")

    assert statuses[-1] == "NORMAL g"


def test_adapter_relays_events_and_quit() -> None:
    controller = make_controller("foo bar")
    events: List[tuple[str, object | None]] = []
    quits: List[bool] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None,
        handle_event=lambda name, payload: events.append((name, payload)),
        request_quit=lambda: quits.append(True),
    )
    adapter = TextualVimAdapter(controller, hooks)

    adapter.handle_textual_key("d", character="d")
    adapter.handle_textual_key("w", character="w")
    result = adapter.handle_textual_key("q", character="q")

    names = [name for name, _payload in events]
    assert "operator.complete" in names
    assert "mode.switch" in names
    assert result is not None and result.kind is TransitionKind.QUIT
    assert quits == [True]


def test_adapter_ignores_unknown_keys() -> None:
    controller = make_controller("abc")
    lines: List[str] = []
    hooks = TextualUIHooks(update_buffer=lambda mirror: None, log=lines.append)
    adapter = TextualVimAdapter(controller, hooks)

    assert adapter.handle_textual_key("f5") is None
    assert lines[-1].startswith("ignored ->")
