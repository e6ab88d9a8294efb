"""API version header gate."""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from api_base.core.responder import ApiResponder
from api_base.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_VERSION = "1"


class ApiVersionMiddleware(BaseHTTPMiddleware):
    """Reject requests whose version header does not match the served version.

    A missing header is treated as version "1".
    """

    def __init__(
        self,
        app,
        version: str = DEFAULT_VERSION,
        header: str = "api-version",
        path_prefix: str = "",
        exclude_paths: list[str] | None = None,
    ):
        """Initialize middleware.

        Args:
            app: FastAPI application
            version: Version served under ``path_prefix``
            header: Request header carrying the requested version
            path_prefix: Only paths starting with this prefix are checked
            exclude_paths: Paths never checked (e.g., health checks)
        """
        super().__init__(app)
        self.version = str(version)
        self.header = header
        self.path_prefix = path_prefix
        self.exclude_paths = exclude_paths or ["/health", "/ready", "/metrics"]

    def applies_to(self, path: str) -> bool:
        if not path.startswith(self.path_prefix):
            return False
        return not any(path.endswith(excluded) for excluded in self.exclude_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        """Check the version header before handing the request on."""
        if request.method == "OPTIONS" or not self.applies_to(request.url.path):
            return await call_next(request)

        requested = request.headers.get(self.header) or DEFAULT_VERSION
        if requested != self.version:
            logger.info(
                "unsupported_api_version",
                requested=requested,
                served=self.version,
                path=request.url.path,
            )
            return ApiResponder().error_unsupported_version().to_json_response()

        return await call_next(request)
