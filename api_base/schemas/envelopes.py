"""Standard API response envelopes."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemMeta(BaseModel):
    """Metadata attached to single-item responses."""

    available_embeds: list[str] = Field(
        default_factory=list, description="Relationships the endpoint can embed"
    )


class ItemEnvelope(BaseModel):
    """Single transformed resource."""

    data: dict[str, Any]
    meta: ItemMeta = Field(default_factory=ItemMeta)


class Cursors(BaseModel):
    """Opaque cursors for the current, previous and next pages."""

    current: Optional[str] = None
    previous: Optional[str] = None
    next: Optional[str] = None


class Pagination(BaseModel):
    """Cursor pagination block.

    ``count`` is the number of items on this page; no running total is sent.
    """

    model_config = ConfigDict(populate_by_name=True)

    cursors: Cursors = Field(default_factory=Cursors)
    count: int = 0
    page_size: int = Field(..., alias="pageSize", description="Effective page size")


class CollectionEnvelope(BaseModel):
    """Ordered page of transformed resources."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    pagination: Pagination


class Notification(BaseModel):
    """Classified human-readable status payload."""

    result: str
    style: Literal["success", "info", "warning", "danger"]
    messages: list[str] = Field(default_factory=list)
    message: str = ""


class NotificationEnvelope(BaseModel):
    """Notification plus the original (unflattened) error payload."""

    notification: Notification
    errors: Any = None


class ErrorBody(BaseModel):
    """Machine-coded error."""

    code: str = Field(..., description="Stable machine-readable error code")
    http_code: int = Field(..., description="HTTP status sent with the error")
    message: str = Field(..., description="Human-readable error message")


class ErrorEnvelope(BaseModel):
    """Standard error response."""

    error: ErrorBody
