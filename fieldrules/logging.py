"""Structured logging setup for fieldrules (structlog over stdlib logging)."""

import logging
from typing import Optional

import structlog

from fieldrules.config import Settings, get_settings

LOGGER_NAME = "fieldrules"


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog for the process.

    Libraries should not configure logging on import, so this is only
    called by applications (or tests) that want fieldrules' events rendered.
    Events go through the stdlib "fieldrules" logger, which gets the
    configured level; a stderr handler is added only if the root logger
    has none.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    logging.getLogger(LOGGER_NAME).setLevel(level)
    logging.basicConfig(format="%(message)s")
