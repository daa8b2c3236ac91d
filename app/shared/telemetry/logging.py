"""Logging configuration for the application."""

import logging
import sys

from app.core.config import Settings, get_settings

# Redis client and SQLAlchemy engine are noisy at DEBUG.
_QUIET_LOGGERS = ("redis", "sqlalchemy.engine", "asyncio")


def setup_logging(settings: Settings | None = None) -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Third-party loggers stay at WARNING.
    """
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
