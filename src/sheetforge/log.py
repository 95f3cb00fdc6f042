"""structlog setup for the Sheetforge command line and services."""

import logging
import sys

import structlog

from sheetforge.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog from settings.

    Library modules only call ``structlog.get_logger``; this is invoked once by
    the entry point.

    Args:
        settings: Settings to read ``log_level``/``log_format`` from. Defaults
            to the cached application settings.
    """
    if settings is None:
        settings = get_settings()

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer: structlog.typing.Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # stdout carries command output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
