"""Structured logging setup for the MCP server.

stdout belongs to the stdio transport, so records are written to the
configured log file or to stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from .config import TelemetryConfig
from .exceptions import GitLabConfigError


def configure_logging(telemetry: TelemetryConfig) -> None:
    """Route structlog and stdlib logging through one renderer and handler."""
    renderer: Any
    if telemetry.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=telemetry.file is None)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler: logging.Handler
    if telemetry.file:
        try:
            handler = logging.FileHandler(telemetry.file, encoding="utf-8")
        except OSError as e:
            msg = f"Cannot open log file {telemetry.file}: {e}"
            raise GitLabConfigError(msg) from e
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.setLevel(telemetry.level.upper())

    # Reduce noise from dependencies
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
