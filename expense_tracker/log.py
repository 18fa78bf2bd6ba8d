"""
Structured Logging

Every service logs through structlog with the stdlib integration, so
level filtering is controlled by the standard logging configuration and
output is one JSON object per line.

Library modules only call get_logger(); configure_logging() is called once
by the application entry point.
"""

import logging
import sys

import structlog


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

_PKG_LOGGER_NAME = "expense_tracker"
_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Attach a single stream handler to the package logger.

    Safe to call more than once; only the first call adds the handler,
    later calls just adjust the level.
    """
    global _configured

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given module name."""
    return structlog.get_logger(name)
