"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def _level_number(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(level: str = "WARNING", fmt: str = "console") -> None:
    """
    Configure structlog for the process.

    Events are written to stderr so that command output on stdout stays
    machine readable.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: "console" for human readable output, "json" for one JSON object per line
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if fmt == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger. Configuration is left to the application."""
    return structlog.get_logger(name)
