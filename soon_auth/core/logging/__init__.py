"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging with JSON formatting for production and
human-readable console output for development.

structlog is also the observability sink of the identity core: swallowed
activity-log failures and best-effort cleanup failures are reported here and
nowhere else.
"""

import logging
import sys

import structlog

from soon_auth.core.config.settings import settings


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    This function sets up structlog with:
    1. ISO format timestamps
    2. Log level inclusion
    3. JSON formatting for production (when json_logs=True)
    4. Console formatting for development
    5. Standard library logger factory, so library logs share the same stream
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_from_settings() -> None:
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)


# Create a singleton logger instance for the application
logger = structlog.get_logger()
