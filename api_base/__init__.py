"""Base layer for JSON HTTP APIs: envelopes, cursor pagination and embeds."""

from api_base.config import Settings, get_settings
from api_base.core import (
    ApiError,
    ApiResponder,
    ApiResponse,
    AttributeTransformer,
    CallableTransformer,
    CursorCodec,
    EmbedSpec,
    ErrorCodes,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ResolvedEmbeds,
    ResponseContext,
    Transformer,
    UnauthorizedError,
    ValidationFailed,
    WrongArgumentsError,
    resolve_embeds,
)

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "ApiResponder",
    "ApiResponse",
    "AttributeTransformer",
    "CallableTransformer",
    "CursorCodec",
    "EmbedSpec",
    "ErrorCodes",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "ResolvedEmbeds",
    "ResponseContext",
    "Settings",
    "Transformer",
    "UnauthorizedError",
    "ValidationFailed",
    "WrongArgumentsError",
    "get_settings",
    "resolve_embeds",
]
