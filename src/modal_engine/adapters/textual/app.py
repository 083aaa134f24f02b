"""Executable Textual app that hosts the modal engine."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Static

from modal_engine.buffer import Buffer, BufferMirror
from modal_engine.host import HostIOError, load_lines, write_lines
from modal_engine.keymaps.models import KeyEvent
from modal_engine.modes.controller import ModeController
from modal_engine.runtime import telemetry

from .controller import TextualUIHooks, TextualVimAdapter

DEFAULT_VIEWPORT_HEIGHT = 20
SELECTION_STYLE = "on grey35"


def create_default_controller(
    lines: Sequence[str] = ("",), *, viewport_height: int = DEFAULT_VIEWPORT_HEIGHT
) -> ModeController:
    """Build a ModeController over a fresh buffer with the default keymaps."""

    buffer = Buffer.from_lines(lines)
    buffer.state.viewport_height = max(1, viewport_height)
    return ModeController(buffer)


@dataclass
class UIState:
    mirror: Optional[BufferMirror] = None
    status_text: str = ""
    cursor_color: str = "default"


def render_mirror(
    mirror: BufferMirror,
    *,
    top: int = 0,
    height: Optional[int] = None,
    cursor_color: str = "default",
) -> Text:
    """Render visible lines with the selection shaded and the cursor marked."""

    if cursor_color == "default":
        cursor_style = "reverse"
    else:
        cursor_style = f"black on {cursor_color}"
    selection = mirror.selection
    last = len(mirror.lines) if height is None else min(len(mirror.lines), top + height)

    result = Text()
    for row in range(top, last):
        line = mirror.lines[row]
        # One extra cell so a cursor past the last character stays visible.
        for col, char in enumerate(line + " "):
            style = ""
            if (row, col) == mirror.cursor:
                style = cursor_style
            elif selection and selection[0] <= (row, col) < selection[1]:
                style = SELECTION_STYLE
            if col == len(line) and not style:
                continue
            result.append(char, style=style)
        if row < last - 1:
            result.append("\n")
    return result


class ModalEngineApp(App[Sequence[str]]):
    """Minimal Textual UI embedding the modal engine.

    The app exits with the final buffer lines as its return value.
    """

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		content-align: left top;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        Binding("ctrl+c", "forward_ctrl_c", show=False, priority=True),
    ]

    def __init__(self, controller: ModeController) -> None:
        super().__init__()
        self.controller = controller
        self.adapter: TextualVimAdapter | None = None
        self._state = UIState()
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self.logger = telemetry.get_logger("modal_engine.adapters.textual")

    def compose(self) -> ComposeResult:
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            update_title=self._update_title,
            update_cursor_style=self._update_cursor_style,
            handle_event=self._handle_event,
            request_quit=self._request_quit,
            log=self._log_line,
        )
        self.adapter = TextualVimAdapter(self.controller, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        self.adapter.handle_textual_key(event.key, character=event.character)
        event.stop()
        event.prevent_default()

    def action_forward_ctrl_c(self) -> None:
        if self.adapter:
            self.adapter.handle_key(KeyEvent("c", ctrl=True))

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.mirror = mirror
        self._render_buffer()

    def _render_buffer(self) -> None:
        mirror = self._state.mirror
        if mirror is None or self._buffer_widget is None:
            return
        state = self.controller.buffer.state
        self._buffer_widget.update(
            render_mirror(
                mirror,
                top=state.viewport_top,
                height=state.viewport_height,
                cursor_color=self._state.cursor_color,
            )
        )

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _update_title(self, title: str) -> None:
        if self._buffer_widget:
            self._buffer_widget.border_title = title

    def _update_cursor_style(self, color: str) -> None:
        self._state.cursor_color = color
        self._render_buffer()

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name.startswith("visual") or name == "operator.complete":
            self._render_buffer()

    def _request_quit(self) -> None:
        self.exit(tuple(self.controller.buffer.lines()))

    def _log_line(self, line: str) -> None:
        self.logger.debug(line)


def _env_int(key: str, fallback: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="modal-engine", description="Edit a file with modal key bindings."
    )
    parser.add_argument("path", nargs="?", help="File to load into the buffer")
    parser.add_argument(
        "--viewport-height",
        type=int,
        default=_env_int(
            f"{telemetry.ENV_PREFIX}VIEWPORT_HEIGHT", DEFAULT_VIEWPORT_HEIGHT
        ),
        help="Lines scrolled by page commands (default: 20)",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=None,
        help="telelog preset to configure logging with",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)

    lines: Sequence[str] = ("",)
    if args.path is not None:
        try:
            lines = load_lines(args.path)
        except HostIOError as exc:
            print(f"modal-engine: {exc}", file=sys.stderr)
            return 1

    controller = create_default_controller(
        lines, viewport_height=args.viewport_height
    )
    result = ModalEngineApp(controller).run()
    write_lines(result if result is not None else controller.buffer.lines(), sys.stdout)
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry point
    sys.exit(main())
