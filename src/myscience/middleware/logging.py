"""Structured logging configuration with structlog."""

import logging

import structlog

from myscience.config import Settings

# Chatty third-party loggers; raised to WARNING unless debugging.
_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "aiosqlite")


def _add_service(_logger: object, _method: str, event_dict: dict) -> dict:
    event_dict.setdefault("service", "myscience-api")
    return event_dict


def setup_logging(settings: Settings) -> None:
    """Configure structlog (JSON in production, console otherwise) and stdlib levels."""
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_service,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Gamification modules log through stdlib; structlog renders on top of it.
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if settings.debug else logging.WARNING)
