"""Shared utilities for the API base layer."""

from api_base.utils.logging import (
    clear_correlation_id,
    configure_logging,
    configure_logging_from_settings,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)
from api_base.utils.metrics import MetricsMiddleware, cursor_state, metrics_endpoint, status_class

__all__ = [
    "clear_correlation_id",
    "configure_logging",
    "configure_logging_from_settings",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "MetricsMiddleware",
    "cursor_state",
    "metrics_endpoint",
    "status_class",
]
