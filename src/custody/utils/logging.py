"""Logging configuration for the Custody domain.

Handlers log through structlog. Levels follow PROTEAN_ENV unless LOG_LEVEL
overrides them, and production renders JSON lines.
"""

import logging
import os
import sys

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def get_log_level() -> str:
    """Get log level based on environment."""
    env = (os.getenv("PROTEAN_ENV") or "development").lower()
    return os.getenv("LOG_LEVEL", _LEVELS.get(env, "INFO")).upper()


def configure_logging() -> None:
    """Configure stdlib and structlog for the custody service."""
    level = get_log_level()
    env = (os.getenv("PROTEAN_ENV") or "development").lower()

    logging.basicConfig(stream=sys.stdout, level=level, format="%(message)s", force=True)
    # Suppress noisy library loggers
    logging.getLogger("protean").setLevel(logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if env in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
