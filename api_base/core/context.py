"""Per-request response context."""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Mapping

from api_base.config import Settings
from api_base.core.cursor import CursorCodec
from api_base.core.embeds import parse_embed_list

CURSOR_PARAMS = ("cursor", "current")
PREVIOUS_PARAM = "previous"
LIMIT_PARAMS = ("limit", "page_size")
EMBED_PARAM = "embed"


def _first(params: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = params.get(name)
        if value not in (None, ""):
            return value
    return None


def clamp_page_size(requested: str | int | None, default: int, maximum: int) -> int:
    """Normalize a requested page size.

    Missing, non-numeric and non-positive values fall back to ``default``;
    anything above ``maximum`` is capped. ``default`` itself never exceeds
    ``maximum``.
    """
    default = min(default, maximum)
    if requested is None:
        return default
    try:
        size = int(requested)
    except (TypeError, ValueError):
        return default
    if size < 1:
        return default
    return min(size, maximum)


@dataclass(frozen=True)
class ResponseContext:
    """Cursor, page size and embed state derived from one request.

    Instances are immutable; build a new one for every request.
    """

    current_cursor_raw: int | None = None
    previous_cursor_raw: int | None = None
    page_size: int = 20
    requested_embeds: tuple[str, ...] = ()
    previous_token: str | None = None
    codec: CursorCodec = field(default_factory=CursorCodec, compare=False, repr=False)

    @classmethod
    def from_query_params(
        cls,
        params: Mapping[str, str],
        settings: Settings,
    ) -> "ResponseContext":
        """Build a context from request query parameters.

        Args:
            params: Query parameters (``cursor``/``current``, ``previous``,
                ``limit``/``page_size``, ``embed``)
            settings: API settings holding the page size bounds

        Returns:
            A new ResponseContext
        """
        codec = CursorCodec(max_length=settings.cursor_max_length)
        previous_token = params.get(PREVIOUS_PARAM)
        previous_raw = codec.decode(previous_token)
        return cls(
            current_cursor_raw=codec.decode(_first(params, CURSOR_PARAMS)),
            previous_cursor_raw=previous_raw,
            previous_token=previous_token.strip() if previous_raw is not None else None,
            page_size=clamp_page_size(
                _first(params, LIMIT_PARAMS),
                default=settings.per_page_default,
                maximum=settings.per_page_max,
            ),
            requested_embeds=parse_embed_list(params.get(EMBED_PARAM)),
            codec=codec,
        )

    @cached_property
    def current_cursor(self) -> str | None:
        """Encoded form of the cursor the caller supplied."""
        return self.codec.encode(self.current_cursor_raw)

    @cached_property
    def previous_cursor(self) -> str | None:
        """The previous cursor as the caller sent it, for links.

        Only a token that decodes is passed through; otherwise the raw
        position is encoded.
        """
        if self.previous_token is not None:
            return self.previous_token
        return self.codec.encode(self.previous_cursor_raw)

    @property
    def has_cursor(self) -> bool:
        return self.current_cursor_raw is not None
