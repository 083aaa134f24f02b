"""Startup file loading and final output for the editor host."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, TextIO

from modal_engine.runtime import telemetry


class HostIOError(OSError):
    """Raised when the host cannot read its input file."""

    def __init__(self, message: str, *, path: str | os.PathLike[str] | None = None):
        super().__init__(message)
        self.path = None if path is None else os.fspath(path)


def load_lines(path: str | os.PathLike[str]) -> list[str]:
    """Read ``path`` as a list of lines without their separators.

    An empty file yields a single empty line so the buffer always has one.
    """

    target = Path(path)
    with telemetry.span(
        "host::load_lines", component="host", metadata={"path": str(target)}
    ) as handle:
        if not target.is_file():
            handle.fail("not_a_file")
            raise HostIOError(f"{target} is not a regular file", path=target)
        try:
            # newline="" keeps a stray "\r" as text instead of a line break
            with target.open("r", encoding="utf-8", newline="") as stream:
                text = stream.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise HostIOError(f"Could not read {target}: {exc}", path=target) from exc

        lines = text.split("\n")
        if text.endswith("\n"):
            lines.pop()
        # one terminator per line: "\n" or "\r\n"
        lines = [line.removesuffix("\r") for line in lines]
        handle.add_metadata("line_count", len(lines))
    return lines or [""]


def write_lines(lines: Iterable[str], sink: TextIO) -> None:
    for line in lines:
        sink.write(line)
        sink.write("\n")
    sink.flush()


__all__ = ["HostIOError", "load_lines", "write_lines"]
