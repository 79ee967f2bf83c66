"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

__all__ = ["setup_logging", "get_logger"]


def setup_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog for the application.

    Args:
        level: Log level name.
        json_output: True for JSON (production), False for console (dev).
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper())

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Get a bound logger with optional initial context."""
    return structlog.get_logger(name, **kwargs)  # type: ignore[no-any-return]
