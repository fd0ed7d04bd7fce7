"""structlog configuration, applied once by the application factory."""

import logging
import sys

import structlog

from app.config import Settings

_CONFIGURED = False


def configure_logging(settings: Settings) -> None:
    """Configure stdlib logging and the structlog processor chain.

    Development gets the coloured console renderer, every other environment
    emits one JSON object per line.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.app_env == "development"
        else structlog.processors.JSONRenderer()
    )
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
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True
