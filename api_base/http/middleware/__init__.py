"""Middleware for APIs built on the base layer."""

from api_base.http.middleware.correlation import CorrelationMiddleware
from api_base.http.middleware.cors import OptionsMiddleware
from api_base.http.middleware.logging import RequestLoggingMiddleware
from api_base.http.middleware.version import ApiVersionMiddleware

__all__ = ["ApiVersionMiddleware", "CorrelationMiddleware", "OptionsMiddleware", "RequestLoggingMiddleware"]
