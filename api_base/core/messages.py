"""Notification message flattening and presentation style."""

from enum import Enum
from typing import Any, Iterable, Mapping

MESSAGE_SEPARATOR = "<br>"


class NotificationResult(str, Enum):
    """Outcome classes a notification can carry."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# UI style per result; anything unknown renders as success
RESULT_STYLES: dict[str, str] = {
    NotificationResult.ERROR.value: "danger",
    NotificationResult.WARNING.value: "warning",
    NotificationResult.INFO.value: "info",
}


def style_for(result: str) -> str:
    """Map a notification result to a presentation style."""
    return RESULT_STYLES.get(str(result).lower(), "success")


def _collapse(values: Iterable[Any], into: list[str]) -> None:
    for value in values:
        if value is None:
            continue
        if isinstance(value, Mapping):
            _collapse(value.values(), into)
        elif isinstance(value, (list, tuple)):
            _collapse(value, into)
        else:
            into.append(str(value))


def flatten_messages(errors: Any) -> list[str]:
    """Flatten a message payload into an ordered list of strings.

    Accepts a single message, a sequence of messages, or a mapping of
    field -> message(s), e.g. ``{"email": ["required"], "name": ["too long"]}``
    becomes ``["required", "too long"]``. Mapping order is preserved.
    """
    if errors is None:
        return []
    if isinstance(errors, str):
        return [errors]

    messages: list[str] = []
    if isinstance(errors, Mapping):
        _collapse(errors.values(), messages)
    elif isinstance(errors, (list, tuple)):
        _collapse(errors, messages)
    else:
        messages.append(str(errors))
    return messages


def join_messages(messages: Iterable[str]) -> str:
    """Join messages with the line-break marker."""
    return MESSAGE_SEPARATOR.join(messages)


def validation_errors_to_fields(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic-style error dicts (``loc``, ``msg``) by field name.

    The request section of ``loc`` (``body``, ``query``, ...) is dropped so
    that ``("body", "email")`` groups under ``"email"``.
    """
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header", "cookie"):
            loc = loc[1:]
        field = ".".join(loc) or "__root__"
        grouped.setdefault(field, []).append(str(error.get("msg", "")))
    return grouped
