"""Logging module with structured logging and request tracking."""

import logging
from typing import TYPE_CHECKING

import structlog

from rbac_api.core.logging.middleware import RequestLoggingMiddleware


if TYPE_CHECKING:
    from rbac_api.config import Settings


def configure_logging(settings: "Settings") -> None:
    """Configure structlog for the application.

    JSON lines in production, human-readable console output otherwise.
    Request-scoped values bound with ``structlog.contextvars`` are merged
    into every event.
    """
    level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.is_production
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


__all__ = ["RequestLoggingMiddleware", "configure_logging"]
