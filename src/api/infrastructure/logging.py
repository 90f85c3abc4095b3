"""Structlog configuration for the CRM API.

Colored console output when attached to a terminal, JSON lines otherwise.
"""

import logging
import os
import sys

import structlog


def _wants_color() -> bool:
    # FORCE_COLOR=1 enables colors in non-TTY environments (like Docker)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stdout.isatty()


def configure_logging(debug: bool = False) -> None:
    """Configure structlog processors and the minimum log level.

    Args:
        debug: Emit debug-level probe events (pool checkouts, lookups)
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if _wants_color():
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    min_level = logging.DEBUG if debug else logging.INFO

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
