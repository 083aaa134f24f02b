"""telelog wiring for the whole package.

Nothing else imports telelog. Callers use :func:`get_logger`,
:func:`record_event` and the :func:`span` context manager; the host picks a
preset through :func:`configure`.

Settings come from ``MODAL_ENGINE_*`` environment variables. Console output
stays off unless ``MODAL_ENGINE_LOG_CONSOLE`` is set, since the terminal host
draws over the whole screen.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "MODAL_ENGINE_"
DEFAULT_LOGGER_NAME = "modal_engine"

_loggers: Dict[str, Any] = {}
_config: Optional[Any] = None


def _setting(name: str, fallback: str = "") -> str:
    return os.environ.get(ENV_PREFIX + name, fallback)


def _enabled(name: str) -> bool:
    return _setting(name).strip().lower() in {"1", "true", "yes", "on"}


def _from_environment() -> Any:
    config = tl.Config()
    config.with_min_level(_setting("LOG_LEVEL", "WARNING").upper())
    config.with_console_output(_enabled("LOG_CONSOLE"))
    config.with_json_format(_enabled("LOG_JSON"))
    if _setting("LOG_FILE"):
        config.with_file_output(_setting("LOG_FILE"))
    if _enabled("LOG_BUFFERED"):
        config.with_buffering(True)
        config.with_buffer_size(int(_setting("LOG_BUFFER_SIZE", "2048")))
    return config


def _development() -> Any:
    config = tl.Config()
    config.with_min_level("DEBUG")
    config.with_console_output(True)
    config.with_colored_output(True)
    return config


def _production() -> Any:
    config = tl.Config()
    config.with_min_level("INFO")
    config.with_console_output(False)
    config.with_file_output(_setting("LOG_FILE", "modal_engine.log"))
    config.with_buffering(True)
    return config


def _performance() -> Any:
    config = tl.Config()
    config.with_min_level("DEBUG")
    config.with_console_output(False)
    config.with_json_format(True)
    config.with_file_output(_setting("LOG_FILE", "modal_engine-performance.log"))
    config.with_buffering(True)
    return config


_PRESET_BUILDERS: Dict[str, Callable[[], Any]] = {
    "development": _development,
    "production": _production,
    "performance": _performance,
}
PRESETS = tuple(_PRESET_BUILDERS)


def configure(*, preset: Optional[str] = None) -> None:
    """Rebuild the telelog configuration from ``preset`` or the environment.

    Loggers handed out earlier keep their old settings; later
    :func:`get_logger` calls see the new ones.
    """

    global _config
    if preset is None:
        config = _from_environment()
    else:
        try:
            config = _PRESET_BUILDERS[preset.lower()]()
        except KeyError:
            raise ValueError(
                f"Unknown log preset {preset!r}; expected one of {', '.join(PRESETS)}"
            ) from None
    # spans rely on profiling
    config.with_profiling(True)
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _loggers:
        if _config is None:
            configure()
        _loggers[logger_name] = tl.Logger.with_config(logger_name, _config)
    return _loggers[logger_name]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else repr(value)


def _log(logger: Any, level: str, message: str, fields: Dict[str, Any]) -> None:
    """Log ``fields`` as structured pairs when telelog offers ``<level>_with``."""

    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, [(key, _text(value)) for key, value in fields.items()])
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level {level!r}")
    plain(f"{message} {fields}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _log(get_logger(logger_name), level.lower(), f"event::{name}", dict(data or {}))


@dataclass
class SpanHandle:
    """Lets the body of a :func:`span` attach results or report a failure."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        fields: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            fields["component"] = self.component_name
        fields["reason"] = reason
        _log(self.logger, "error", "span::fail", fields)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``.

    ``component=True`` also tracks it as a component called ``name``; a
    string picks another component name. ``metadata`` is pushed as logger
    context while the block runs. An exception escaping the block is logged
    through :meth:`SpanHandle.fail` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(log, name, component_name, dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "ENV_PREFIX",
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
