"""Pydantic schemas for API response envelopes."""

from api_base.schemas.envelopes import (
    CollectionEnvelope,
    Cursors,
    ErrorBody,
    ErrorEnvelope,
    ItemEnvelope,
    ItemMeta,
    Notification,
    NotificationEnvelope,
    Pagination,
)

__all__ = [
    "CollectionEnvelope",
    "Cursors",
    "ErrorBody",
    "ErrorEnvelope",
    "ItemEnvelope",
    "ItemMeta",
    "Notification",
    "NotificationEnvelope",
    "Pagination",
]
