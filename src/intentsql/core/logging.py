"""Logging setup: structlog rendered through stdlib handlers.

Every record passes the same processor chain, then goes to one handler per
configured output::

    logging:
      level: INFO
      outputs:
        - format: console            # stderr
        - format: json
          destination: /var/log/intentsql.jsonl
          level: DEBUG

Lines logged while a build runs carry that build's ``build_id``. Console
handlers stay quiet while a progress bar owns the terminal.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from intentsql.config.models import LoggingConfig, LogOutputConfig

_build_id: ContextVar[str | None] = ContextVar("build_id", default=None)

_CONSOLE_DESTINATIONS = ("stderr", "stdout")


def get_build_id() -> str | None:
    return _build_id.get()


def set_build_id(build_id: str | None = None) -> str:
    """Start correlating log lines with a build. Generates an id if none is given."""
    value = build_id or uuid4().hex[:12]
    _build_id.set(value)
    return value


def clear_build_id() -> None:
    _build_id.set(None)


def _inject_build_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    build_id = _build_id.get()
    if build_id is not None:
        event_dict.setdefault("build_id", build_id)
    return event_dict


_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    _inject_build_id,  # type: ignore[list-item]
]


def _level(name: str | None, fallback: int = logging.INFO) -> int:
    if name is None:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


class _LiveDisplayFilter(logging.Filter):
    """Holds back console records while a progress bar is drawing."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from intentsql.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _formatter(fmt: str, *, colors: bool) -> logging.Formatter:
    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_SHARED_PROCESSORS,
    )


def _handler(output: LogOutputConfig, level: int) -> logging.Handler:
    handler: logging.Handler
    match output.destination:
        case "stderr":
            handler = logging.StreamHandler(sys.stderr)
        case "stdout":
            handler = logging.StreamHandler(sys.stdout)
        case path:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    console = output.destination in _CONSOLE_DESTINATIONS
    if console:
        handler.addFilter(_LiveDisplayFilter())
    handler.setLevel(level)
    handler.setFormatter(_formatter(output.format, colors=console and sys.stderr.isatty()))
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog through stdlib handlers, one per configured output.

    ``config`` wins over ``json_format`` and ``level``; those two only
    describe a single stderr output for callers without a config.
    Calling again replaces the previous handlers.
    """
    from intentsql.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created at import time
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_handler(output, _level(output.level, root_level)))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
