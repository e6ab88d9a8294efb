"""Request/response logging middleware."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from api_base.core.context import CURSOR_PARAMS, EMBED_PARAM, LIMIT_PARAMS
from api_base.utils.logging import get_logger

logger = get_logger(__name__)

# Query parameters worth recording for pagination/embedding diagnostics
_LOGGED_PARAMS = (*CURSOR_PARAMS, "previous", *LIMIT_PARAMS, EMBED_PARAM)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _pagination_params(request: Request) -> dict[str, str]:
    return {name: request.query_params[name] for name in _LOGGED_PARAMS if name in request.query_params}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Structured request logging with timing and pagination context."""

    def __init__(
        self,
        app,
        enabled: bool = True,
        exclude_paths: list[str] | None = None,
    ):
        """Initialize middleware.

        Args:
            app: FastAPI application
            enabled: Whether logging is enabled
            exclude_paths: Paths to exclude from logging (e.g., health checks)
        """
        super().__init__(app)
        self.enabled = enabled
        self.exclude_paths = exclude_paths or ["/health", "/ready", "/metrics"]

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        """Process request with logging."""
        path = request.url.path
        if not self.enabled or any(path.endswith(excluded) for excluded in self.exclude_paths):
            return await call_next(request)

        log = logger.bind(method=request.method, path=path, client_ip=_client_ip(request))
        log.info("request_started", params=_pagination_params(request))

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                "request_failed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        log_method = log.info if response.status_code < 400 else log.warning
        log_method(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response
