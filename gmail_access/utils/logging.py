"""
Structured logging configuration using structlog.

All output goes to stderr; stdout belongs to the tool-invocation transport.
Importing this module routes structlog to stderr straight away, so services
never print to stdout even when the host does not call configure_logging().
"""

import logging
import sys

import structlog
from structlog.typing import Processor

from gmail_access.config.settings import settings


def _renderer() -> Processor:
    if settings.app.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging() -> None:
    """
    Configure structured logging through stdlib logging.

    Hosts call this once at startup to get logger names, stack info and
    exception formatting alongside their own stdlib handlers.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.app.log_level),
    )


def configure_default_logging() -> None:
    """Print structlog events to stderr unless logging is already configured."""
    if structlog.is_configured():
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, settings.app.log_level)),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


configure_default_logging()
