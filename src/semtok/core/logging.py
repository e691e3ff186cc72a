"""Structured logging for semtok.

structlog renders through stdlib logging so every output (stderr, stdout or a
log file) gets its own level and renderer. Events logged while a token
request is being served carry that request's id and document.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from semtok.config.models import LoggingConfig, LogOutputConfig

_request: ContextVar[dict[str, str] | None] = ContextVar("semtok_request", default=None)


def get_request_id() -> str | None:
    current = _request.get()
    return current["request_id"] if current else None


@contextmanager
def request_context(document: str | None = None, request_id: str | None = None) -> Iterator[str]:
    """Tag log events inside the block with a request id (generated if omitted)."""
    context = {"request_id": request_id or uuid4().hex[:12]}
    if document is not None:
        context["document"] = document
    token = _request.set(context)
    try:
        yield context["request_id"]
    finally:
        _request.reset(token)


def _add_request_context(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    current = _request.get()
    if current:
        for key, value in current.items():
            event_dict.setdefault(key, value)
    return event_dict


def _level_number(name: str | None, default: int = logging.INFO) -> int:
    if not name:
        return default
    number = logging.getLevelNamesMapping().get(name.upper())
    return default if number is None else number


def _renderer(output: LogOutputConfig) -> structlog.types.Processor:
    if output.format == "json":
        return structlog.processors.JSONRenderer()
    to_terminal = output.destination in ("stderr", "stdout") and sys.stderr.isatty()
    return structlog.dev.ConsoleRenderer(colors=to_terminal, pad_event_to=0, pad_level=False)


def _open_destination(destination: str) -> logging.Handler:
    if destination in ("stderr", "stdout"):
        return logging.StreamHandler(getattr(sys, destination))
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install structlog processors and one root handler per configured output.

    Args:
        config: Logging section with explicit outputs. When given, the
            ``json_format`` and ``level`` shortcuts are ignored.
        json_format: Render the single stderr output as JSON lines.
        level: Level of the single stderr output.
    """
    from semtok.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    base_level = _level_number(config.level)
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_request_context,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(base_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must pick up later reconfiguration
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(base_level)
    for output in config.outputs:
        handler = _open_destination(output.destination)
        handler.setLevel(_level_number(output.level, base_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_renderer(output),
                foreign_pre_chain=pre_chain,
            )
        )
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """structlog logger, tagged with ``logger=name`` when a name is given."""
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger  # type: ignore[no-any-return]
