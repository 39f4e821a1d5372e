"""Structured logging setup for flatbuild.

Generated programs are often written to stdout, so log output goes to
stderr by default.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOG_LEVELS = ("debug", "info", "warning", "error")


def configure_logging(level: str = "warning", stream: TextIO | None = None) -> None:
    """Configure structlog for flatbuild.

    Args:
        level: Minimum level name (debug, info, warning, error).
        stream: Output stream. Defaults to stderr.

    Example:
        >>> configure_logging("debug")
        >>> structlog.get_logger("flatbuild").info("program_assembled", targets=3)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'. Expected one of: {', '.join(LOG_LEVELS)}")

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )
