"""Structured logging configuration with structlog."""

import logging

import structlog

from nextboard.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output.

    ``log_format="json"`` in production, anything else renders for a terminal.
    The debug flag forces DEBUG regardless of ``log_level``.
    """
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    # SQL statements are logged by the providers on failure only.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
