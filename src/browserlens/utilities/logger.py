"""Logging setup for browserlens.

structlog loggers (orchestrator, engine) and plain ``logging.getLogger``
loggers (buffer, providers, sinks) share one stderr handler, so both
render through the same console or JSON renderer.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

HANDLER_NAME = "browserlens"


def _shared_processors() -> list[Any]:
    """Processors applied to structlog and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def build_formatter(*, json_output: bool = False) -> structlog.stdlib.ProcessorFormatter:
    """Formatter that renders any stdlib record with the structlog renderer."""
    renderer: Any
    if json_output:
        final: list[Any] = [structlog.processors.format_exc_info]
        renderer = structlog.processors.JSONRenderer()
    else:
        final = []
        renderer = structlog.dev.ConsoleRenderer()
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *final,
            renderer,
        ],
    )


def setup_logging(*, debug: bool = False, json_output: bool = False) -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call more than once; the previous browserlens handler is
    replaced rather than duplicated.

    Args:
        debug: Enable DEBUG level logging.
        json_output: Render every record as one JSON object per line.
    """
    level = logging.DEBUG if debug else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(build_formatter(json_output=json_output))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "browserlens", **kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name, **kwargs)
