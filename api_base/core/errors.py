"""Error codes and the ApiError exception family."""

from typing import Any, Mapping


class ErrorCodes:
    """Stable machine-readable error codes (``<http status>-<sequence>``)."""

    CODE_WRONG_ARGUMENTS = "400-001"
    CODE_UNSUPPORTED_VERSION = "400-002"
    CODE_UNAUTHORIZED = "401-001"
    CODE_FORBIDDEN = "403-001"
    CODE_NOT_FOUND = "404-001"
    CODE_VALIDATION = "422-001"
    CODE_INTERNAL_ERROR = "500-001"


# Default human messages per code
ERROR_MESSAGES: dict[str, str] = {
    ErrorCodes.CODE_WRONG_ARGUMENTS: "Wrong Arguments",
    ErrorCodes.CODE_UNSUPPORTED_VERSION: "Unsupported API Version.",
    ErrorCodes.CODE_UNAUTHORIZED: "Unauthorized",
    ErrorCodes.CODE_FORBIDDEN: "Forbidden",
    ErrorCodes.CODE_NOT_FOUND: "Resource Not Found",
    ErrorCodes.CODE_VALIDATION: "Validation Failed",
    ErrorCodes.CODE_INTERNAL_ERROR: "Internal Error",
}


class ErrorCatalog:
    """Lookup of human messages by error code.

    Applications can register their own codes on top of the defaults.
    """

    def __init__(self, messages: Mapping[str, str] | None = None):
        self._messages = dict(ERROR_MESSAGES)
        if messages:
            self._messages.update(messages)

    def register(self, code: str, message: str) -> None:
        self._messages[code] = message

    def get_message(self, code: str) -> str:
        """Message for a code, or a generic fallback naming the code."""
        return self._messages.get(code, f"Error {code}")

    def __contains__(self, code: object) -> bool:
        return code in self._messages


def http_status_for_code(code: str, default: int = 500) -> int:
    """Derive the HTTP status from a ``<status>-<seq>`` code."""
    head = code.split("-", 1)[0]
    if head.isdigit() and 100 <= int(head) <= 599:
        return int(head)
    return default


class StatusCodeWarning(UserWarning):
    """Raised via ``warnings.warn`` when an error response still carries 200."""


class ApiError(Exception):
    """Base class for domain errors rendered as coded error envelopes."""

    code: str = ErrorCodes.CODE_INTERNAL_ERROR
    http_status: int = 500
    default_message: str = "Internal Error"

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        http_status: int | None = None,
    ):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
            if http_status is None:
                http_status = http_status_for_code(code, default=self.http_status)
        if http_status is not None:
            self.http_status = http_status
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "http_code": self.http_status, "message": self.message}


class WrongArgumentsError(ApiError):
    """Raised when request arguments are unusable."""

    code = ErrorCodes.CODE_WRONG_ARGUMENTS
    http_status = 400
    default_message = "Wrong Arguments"


class UnsupportedVersionError(ApiError):
    code = ErrorCodes.CODE_UNSUPPORTED_VERSION
    http_status = 400
    default_message = "Unsupported API Version."


class UnauthorizedError(ApiError):
    code = ErrorCodes.CODE_UNAUTHORIZED
    http_status = 401
    default_message = "Unauthorized"


class ForbiddenError(ApiError):
    code = ErrorCodes.CODE_FORBIDDEN
    http_status = 403
    default_message = "Forbidden"


class NotFoundError(ApiError):
    code = ErrorCodes.CODE_NOT_FOUND
    http_status = 404
    default_message = "Resource Not Found"


class InternalError(ApiError):
    code = ErrorCodes.CODE_INTERNAL_ERROR
    http_status = 500
    default_message = "Internal Error"


class ValidationFailed(Exception):
    """Raised with a field -> messages mapping; rendered as a 422 notification."""

    def __init__(self, errors: Mapping[str, Any] | list[str] | str):
        self.errors = errors
        super().__init__("Validation failed")
