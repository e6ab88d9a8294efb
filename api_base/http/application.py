"""Wire the API base layer into a FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api_base.config import Settings, get_settings
from api_base.http.error_handlers import register_error_handlers
from api_base.http.middleware.correlation import CorrelationMiddleware
from api_base.http.middleware.cors import OptionsMiddleware
from api_base.http.middleware.logging import RequestLoggingMiddleware
from api_base.http.middleware.version import ApiVersionMiddleware
from api_base.utils.logging import configure_logging_from_settings, get_logger
from api_base.utils.metrics import MetricsMiddleware, metrics_endpoint

logger = get_logger(__name__)


def _options_origin(origins: list[str]) -> str:
    if not origins or "*" in origins:
        return "*"
    return origins[0]


def setup_api(
    app: FastAPI,
    settings: Settings | None = None,
    version_prefix: str = "",
    metrics: bool = True,
) -> FastAPI:
    """Install error handlers and middleware on an existing app.

    Middleware runs outermost first: correlation ID, request logging, CORS
    preflights, bare OPTIONS replies, API version gate, metrics.

    Args:
        app: Application to configure
        settings: API settings (defaults to environment settings)
        version_prefix: Only paths under this prefix are version-checked
        metrics: Whether to collect metrics and expose ``/metrics``
    """
    settings = settings or get_settings()

    register_error_handlers(app)

    if metrics:
        app.add_middleware(MetricsMiddleware, cursor_max_length=settings.cursor_max_length)
        app.add_route("/metrics", metrics_endpoint)

    app.add_middleware(
        ApiVersionMiddleware,
        version=settings.api_version,
        header=settings.version_header,
        path_prefix=version_prefix,
    )
    app.add_middleware(
        OptionsMiddleware,
        allow_origin=_options_origin(settings.cors_origins),
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )
    app.add_middleware(RequestLoggingMiddleware, enabled=settings.environment != "test")
    app.add_middleware(CorrelationMiddleware)

    logger.info(
        "api_base_installed",
        api_version=settings.api_version,
        per_page_default=settings.effective_per_page_default,
        per_page_max=settings.per_page_max,
    )
    return app


def create_app(settings: Settings | None = None, **kwargs) -> FastAPI:
    """Create a FastAPI app with logging configured and the base layer installed.

    Extra keyword arguments are passed to ``FastAPI``.
    """
    settings = settings or get_settings()
    configure_logging_from_settings(settings)

    app = FastAPI(title=settings.service_name, debug=settings.debug, **kwargs)
    return setup_api(app, settings)
