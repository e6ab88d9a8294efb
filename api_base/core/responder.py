"""Envelope builder.

Controllers hold one ``ApiResponder`` per request and call it to render items,
collections, notifications and coded errors. The status code is set before
rendering (``set_status_code``) and is carried into every envelope.
"""

import warnings
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from fastapi.responses import JSONResponse

from api_base.core.context import ResponseContext
from api_base.core.embeds import EmbedSpec, ResolvedEmbeds, resolve_spec
from api_base.core.errors import (
    ApiError,
    ErrorCatalog,
    ErrorCodes,
    StatusCodeWarning,
)
from api_base.core.messages import NotificationResult
from api_base.core.transformer import MessageTransformer, Transformer, as_transformer, record_identifier
from api_base.schemas.envelopes import (
    CollectionEnvelope,
    Cursors,
    ErrorBody,
    ErrorEnvelope,
    ItemEnvelope,
    ItemMeta,
    NotificationEnvelope,
    Pagination,
)
from api_base.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {"Access-Control-Allow-Origin": "*"}

TransformerLike = Transformer | Callable[[Any], Mapping[str, Any]]


@dataclass(frozen=True)
class ApiResponse:
    """Rendered body and the status code it was built with."""

    body: dict[str, Any]
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)

    def to_json_response(self) -> JSONResponse:
        return JSONResponse(
            content=self.body,
            status_code=self.status_code,
            headers={**DEFAULT_HEADERS, **self.headers},
            media_type="application/json",
        )


class ApiResponder:
    """Per-request envelope builder."""

    def __init__(
        self,
        context: ResponseContext | None = None,
        embed_spec: EmbedSpec | None = None,
        catalog: ErrorCatalog | None = None,
        id_field: str = "id",
    ):
        """Initialize the responder.

        Args:
            context: Request context (cursors, page size, requested embeds)
            embed_spec: Embeds the endpoint allows and always adds
            catalog: Error message lookup for ``custom_error``
            id_field: Record field used as the pagination position
        """
        self.context = context or ResponseContext()
        self.embed_spec = embed_spec or EmbedSpec()
        self.catalog = catalog or ErrorCatalog()
        self.id_field = id_field
        self.status_code = 200
        self._embeds = resolve_spec(self.context.requested_embeds, self.embed_spec)

    @property
    def embeds(self) -> ResolvedEmbeds:
        """Active embeds, resolved once for the request."""
        return self._embeds

    def get_status_code(self) -> int:
        return self.status_code

    def set_status_code(self, status_code: int) -> "ApiResponder":
        self.status_code = status_code
        return self

    # Success payloads

    def item(self, record: Any, transformer: TransformerLike) -> ApiResponse:
        """Render a single resource with its active embeds."""
        data = as_transformer(transformer).transform_item(record, self.embeds)
        envelope = ItemEnvelope(
            data=data,
            meta=ItemMeta(available_embeds=list(self.embed_spec.possible)),
        )
        return self.respond_with_array(envelope.model_dump(mode="json"))

    def collection(self, records: Iterable[Any], transformer: TransformerLike) -> ApiResponse:
        """Render a page of resources with cursor pagination."""
        records = list(records)
        next_cursor = None
        if records:
            next_cursor = self.context.codec.encode(record_identifier(records[-1], self.id_field))

        envelope = CollectionEnvelope(
            data=as_transformer(transformer).transform_collection(records, self.embeds),
            pagination=Pagination(
                cursors=Cursors(
                    current=self.context.current_cursor,
                    previous=self.context.previous_cursor,
                    next=next_cursor,
                ),
                count=len(records),
                page_size=self.context.page_size,
            ),
        )
        return self.respond_with_array(envelope.model_dump(mode="json", by_alias=True))

    def respond_with_array(
        self,
        body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        return ApiResponse(body=body, status_code=self.status_code, headers=headers or {})

    # Notifications

    def notification(self, result: str | NotificationResult, errors: Any) -> ApiResponse:
        """Render a classified notification.

        ``errors`` may be a message, a list of messages or a field -> messages
        mapping; the rendered ``messages`` list is always flat.
        """
        if isinstance(result, NotificationResult):
            result = result.value
        if result == NotificationResult.ERROR.value:
            self._warn_if_success("notification")
        body = MessageTransformer().transform({"result": result, "errors": errors})
        return self.respond_with_array(NotificationEnvelope(**body).model_dump(mode="json"))

    def success_notification(self, message: Any, status_code: int = 200) -> ApiResponse:
        return self.set_status_code(status_code).notification(NotificationResult.SUCCESS, message)

    def info_notification(self, message: Any, status_code: int = 200) -> ApiResponse:
        return self.set_status_code(status_code).notification(NotificationResult.INFO, message)

    def warning_notification(self, message: Any, status_code: int = 200) -> ApiResponse:
        return self.set_status_code(status_code).notification(NotificationResult.WARNING, message)

    def error_notification(self, message: Any, status_code: int = 500) -> ApiResponse:
        return self.set_status_code(status_code).notification(NotificationResult.ERROR, message)

    def error_validation(self, errors: Any) -> ApiResponse:
        """422 error notification with the flattened validation messages."""
        return self.set_status_code(422).notification(NotificationResult.ERROR, errors)

    # Coded errors

    def error(self, message: str, code: str) -> ApiResponse:
        """Render a coded error with the current status code."""
        self._warn_if_success("error", code=code)
        envelope = ErrorEnvelope(
            error=ErrorBody(code=code, http_code=self.status_code, message=message)
        )
        return self.respond_with_array(envelope.model_dump())

    def custom_error(self, code: str, http_status: int | None = None) -> ApiResponse:
        """Render a coded error whose message comes from the catalog.

        When ``http_status`` is given it replaces the current status code.
        """
        if http_status:
            self.status_code = http_status
        return self.error(self.catalog.get_message(code), code)

    def from_exception(self, exc: ApiError) -> ApiResponse:
        """Render an ApiError raised further down the call stack."""
        return self.set_status_code(exc.http_status).error(exc.message, exc.code)

    def error_wrong_args(self, message: str = "Wrong Arguments") -> ApiResponse:
        return self.set_status_code(400).error(message, ErrorCodes.CODE_WRONG_ARGUMENTS)

    def error_unsupported_version(self, message: str = "Unsupported API Version.") -> ApiResponse:
        return self.set_status_code(400).error(message, ErrorCodes.CODE_UNSUPPORTED_VERSION)

    def error_unauthorized(self, message: str = "Unauthorized") -> ApiResponse:
        return self.set_status_code(401).error(message, ErrorCodes.CODE_UNAUTHORIZED)

    def error_forbidden(self, message: str = "Forbidden") -> ApiResponse:
        return self.set_status_code(403).error(message, ErrorCodes.CODE_FORBIDDEN)

    def error_not_found(self, message: str = "Resource Not Found") -> ApiResponse:
        return self.set_status_code(404).error(message, ErrorCodes.CODE_NOT_FOUND)

    def error_internal(self, message: str = "Internal Error") -> ApiResponse:
        return self.set_status_code(500).error(message, ErrorCodes.CODE_INTERNAL_ERROR)

    def _warn_if_success(self, kind: str, code: str | None = None) -> None:
        # Misuse is reported, never raised
        if self.status_code != 200:
            return
        logger.warning("error_response_with_success_status", kind=kind, code=code)
        warnings.warn(
            "You better have a really good reason for erroring on a 200...",
            StatusCodeWarning,
            stacklevel=3,
        )
