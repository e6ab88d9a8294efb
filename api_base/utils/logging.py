"""Structured logging bound to the current request."""

import logging
import sys
import uuid
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from api_base.config import Settings

CORRELATION_KEY = "correlation_id"


def get_correlation_id() -> str:
    """Get the correlation ID bound to the current request context."""
    return structlog.contextvars.get_contextvars().get(CORRELATION_KEY, "")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the request context. Generates one if not provided."""
    cid = correlation_id or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(**{CORRELATION_KEY: cid})
    return cid


def clear_correlation_id() -> None:
    """Drop the correlation ID once a request is finished."""
    structlog.contextvars.unbind_contextvars(CORRELATION_KEY)


def _build_processors(json_format: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    json_format: bool = True,
    capture_warnings: bool = True,
) -> None:
    """Configure structured logging for an API.

    Args:
        service_name: Name of the API, bound to every log event
        log_level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Whether to output JSON logs (True for production)
        capture_warnings: Route ``warnings.warn`` diagnostics (e.g. a
            response erroring on a 200) into the ``py.warnings`` logger
    """
    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )
    logging.captureWarnings(capture_warnings)

    structlog.contextvars.bind_contextvars(service=service_name)


def configure_logging_from_settings(settings: "Settings") -> None:
    """Configure logging from the API settings object."""
    configure_logging(
        service_name=settings.service_name,
        log_level=settings.log_level,
        json_format=settings.log_json,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)
