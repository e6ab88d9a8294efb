"""Global exception handlers rendering errors as API envelopes.

- ApiError → coded error envelope with the error's HTTP status
- ValidationFailed / RequestValidationError → 422 error notification
- Exception (catch-all) → 500 internal error, never leaking details
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api_base.core.errors import ApiError, ValidationFailed
from api_base.core.messages import validation_errors_to_fields
from api_base.core.responder import ApiResponder
from api_base.http.middleware.correlation import CorrelationMiddleware
from api_base.utils.logging import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all envelope-producing error handlers on the FastAPI app."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Handle domain errors raised by controllers or repositories."""
    log_method = logger.warning if exc.http_status < 500 else logger.error
    log_method(
        "api_error",
        code=exc.code,
        http_status=exc.http_status,
        path=request.url.path,
        error=exc.message,
    )
    return ApiResponder().from_exception(exc).to_json_response()


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    """Handle explicit validation failures from controllers."""
    logger.info("validation_failed", path=request.url.path)
    return ApiResponder().error_validation(exc.errors).to_json_response()


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI request validation errors as a 422 notification."""
    fields = validation_errors_to_fields(exc.errors())
    logger.info("request_validation_failed", path=request.url.path, fields=list(fields))
    return ApiResponder().error_validation(fields).to_json_response()


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all that hides internal details from the caller.

    Starlette runs this handler in its outermost error middleware, after the
    correlation middleware has finished, and re-raises the exception once the
    response is sent so servers still log it. The correlation ID is read back
    from the request state and echoed here.
    """
    correlation_id = getattr(request.state, "correlation_id", None)
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
        correlation_id=correlation_id,
    )
    response = ApiResponder().error_internal().to_json_response()
    if correlation_id:
        response.headers[CorrelationMiddleware.CORRELATION_ID_HEADER] = correlation_id
    return response
