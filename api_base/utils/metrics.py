"""Prometheus metrics for enveloped API responses and cursor usage."""

import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

from api_base.core.context import CURSOR_PARAMS
from api_base.core.cursor import DEFAULT_MAX_CURSOR_LENGTH, decode_cursor

RESPONSE_COUNT = Counter(
    "api_responses_total",
    "API responses by route template and status class",
    ["method", "endpoint", "status_class"],
)

RESPONSE_LATENCY = Histogram(
    "api_response_duration_seconds",
    "API response latency in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# Rejected cursors are served from the first page, so count them separately
CURSOR_REQUESTS = Counter(
    "api_cursor_requests_total",
    "Requests by state of the supplied pagination cursor",
    ["state"],
)


def status_class(status_code: int) -> str:
    """Collapse a status code into its class label ("2xx", "4xx", ...)."""
    return f"{status_code // 100}xx"


def cursor_state(request: Request, max_length: int = DEFAULT_MAX_CURSOR_LENGTH) -> str:
    """Classify the request's cursor as "none", "valid" or "rejected"."""
    token = next((request.query_params[name] for name in CURSOR_PARAMS if request.query_params.get(name)), None)
    if token is None:
        return "none"
    if decode_cursor(token, max_length=max_length) is None:
        return "rejected"
    return "valid"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record response counts, latency and cursor usage."""

    def __init__(self, app, cursor_max_length: int = DEFAULT_MAX_CURSOR_LENGTH):
        super().__init__(app)
        self.cursor_max_length = cursor_max_length

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        # Route template keeps label cardinality bounded
        route = request.scope.get("route")
        endpoint = route.path if route is not None else request.url.path

        RESPONSE_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status_class=status_class(response.status_code),
        ).inc()
        RESPONSE_LATENCY.labels(method=request.method, endpoint=endpoint).observe(duration)
        if request.method == "GET":
            CURSOR_REQUESTS.labels(state=cursor_state(request, self.cursor_max_length)).inc()

        return response


async def metrics_endpoint(request: Request) -> StarletteResponse:
    """Expose collected metrics in the Prometheus text format."""
    return StarletteResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
