"""Correlation ID middleware for request tracing."""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from api_base.utils.logging import clear_correlation_id, set_correlation_id


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind a correlation ID to each request and echo it on the response."""

    CORRELATION_ID_HEADER = "X-Correlation-ID"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        """Process request with correlation ID.

        Reuses the caller's ``X-Correlation-ID`` or generates a new one, binds
        it into the log context for the lifetime of the request and returns it
        in the response headers.
        """
        correlation_id = set_correlation_id(request.headers.get(self.CORRELATION_ID_HEADER))
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()

        response.headers[self.CORRELATION_ID_HEADER] = correlation_id
        return response
