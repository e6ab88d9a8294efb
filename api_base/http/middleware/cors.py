"""Answer OPTIONS requests that are not full CORS preflights."""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class OptionsMiddleware(BaseHTTPMiddleware):
    """Reply 200 to any OPTIONS request that reaches it.

    Starlette's ``CORSMiddleware`` only intercepts preflights carrying
    ``Origin`` and ``Access-Control-Request-Method``; a bare OPTIONS would
    otherwise reach the router and get a 405.
    """

    def __init__(
        self,
        app,
        allow_origin: str = "*",
        allow_methods: list[str] | None = None,
        allow_headers: list[str] | None = None,
    ):
        super().__init__(app)
        self.headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ", ".join(allow_methods or []),
            "Access-Control-Allow-Headers": ", ".join(allow_headers or []),
        }

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        if request.method != "OPTIONS":
            return await call_next(request)
        return Response(status_code=200, headers=self.headers)
