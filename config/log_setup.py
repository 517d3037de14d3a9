"""
structlog configuration shared by the API and the CLI.
"""

import logging
import sys
from typing import Optional

import structlog

from config.settings import settings


def _stderr_logger_factory(*args) -> structlog.PrintLogger:
    # sys.stderr is resolved per logger; test runners swap it.
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure structlog processors and the log level filter.

    Args:
        level: Log level name. Defaults to settings.log_level.
        fmt: 'json' or 'console'. Defaults to settings.log_format.
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if (fmt or settings.log_format).lower() == "console":
        # ConsoleRenderer formats exceptions itself.
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
