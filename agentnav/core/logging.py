"""Structured logging setup.

Console rendering for interactive use, JSON lines when ``log_format`` is
``json``. Log output goes to stderr so it never mixes with CLI output or
exported JSON written to stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


class StderrLoggerFactory:
    """Create print loggers on whatever ``sys.stderr`` is at call time."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(sys.stderr)


def configure_logging(settings: Any | None = None) -> None:
    """Configure structlog for the process.

    Args:
        settings: Optional settings instance. Loaded from the environment
            when not provided.
    """
    if settings is None:
        from agentnav.core.config import get_settings

        settings = get_settings()

    level = getattr(logging, str(settings.log_level).upper(), logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=StderrLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # Third-party libraries (httpx) log through the standard library
    logging.getLogger("httpx").setLevel(level)


def get_logger(name: str | None = None) -> Any:
    """Return a structured logger bound to ``name``."""
    return structlog.get_logger(name or "agentnav")
