"""structlog configuration.

Console output with colors in development, one JSON object per line
everywhere else. request_id (bound by RequestIdMiddleware) is merged
into every entry through structlog's contextvars.
"""

import logging
import sys

import structlog

from taskflow.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the stdlib root logger for the app."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.log_format == "json" or not settings.is_development:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # Third-party libraries (uvicorn, sqlalchemy) log through stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
