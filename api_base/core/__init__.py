"""Response construction and cursor pagination core."""

from api_base.core.context import ResponseContext, clamp_page_size
from api_base.core.cursor import CursorCodec, decode_cursor, encode_cursor
from api_base.core.embeds import EmbedSpec, ResolvedEmbeds, resolve_embeds, resolve_spec, sanitize_scope
from api_base.core.errors import (
    ApiError,
    ErrorCatalog,
    ErrorCodes,
    ForbiddenError,
    InternalError,
    NotFoundError,
    StatusCodeWarning,
    UnauthorizedError,
    UnsupportedVersionError,
    ValidationFailed,
    WrongArgumentsError,
)
from api_base.core.messages import NotificationResult, flatten_messages, style_for
from api_base.core.responder import ApiResponder, ApiResponse
from api_base.core.transformer import (
    ABSENT,
    AttributeTransformer,
    CallableTransformer,
    MessageTransformer,
    Transformer,
    load_relation,
)

__all__ = [
    "ABSENT",
    "ApiError",
    "ApiResponder",
    "ApiResponse",
    "AttributeTransformer",
    "CallableTransformer",
    "CursorCodec",
    "EmbedSpec",
    "ErrorCatalog",
    "ErrorCodes",
    "ForbiddenError",
    "InternalError",
    "MessageTransformer",
    "NotFoundError",
    "NotificationResult",
    "ResolvedEmbeds",
    "ResponseContext",
    "StatusCodeWarning",
    "Transformer",
    "UnauthorizedError",
    "UnsupportedVersionError",
    "ValidationFailed",
    "WrongArgumentsError",
    "clamp_page_size",
    "decode_cursor",
    "encode_cursor",
    "flatten_messages",
    "load_relation",
    "resolve_embeds",
    "resolve_spec",
    "sanitize_scope",
    "style_for",
]
