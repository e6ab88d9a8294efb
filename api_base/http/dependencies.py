"""FastAPI dependency injection for response building."""

from typing import Annotated, Callable, Iterable

from fastapi import Depends, Request

from api_base.config import Settings, get_settings
from api_base.core.context import ResponseContext
from api_base.core.embeds import EmbedSpec
from api_base.core.responder import ApiResponder


def get_response_context(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ResponseContext:
    """Build the per-request context from query parameters."""
    return ResponseContext.from_query_params(request.query_params, settings)


def responder_for(
    embed_spec: EmbedSpec | None = None,
    *,
    possible: Iterable[str] = (),
    permanent: Iterable[str] = (),
    id_field: str = "id",
) -> Callable[[ResponseContext], ApiResponder]:
    """Create a dependency yielding an ApiResponder for one endpoint.

    Usage:
        POST_EMBEDS = EmbedSpec(possible=("author", "comments"))

        @router.get("/posts")
        async def list_posts(
            responder: Annotated[ApiResponder, Depends(responder_for(POST_EMBEDS))],
        ):
            ...
    """
    spec = embed_spec or EmbedSpec(possible=tuple(possible), permanent=tuple(permanent))

    def get_responder(
        context: Annotated[ResponseContext, Depends(get_response_context)],
    ) -> ApiResponder:
        return ApiResponder(context, spec, id_field=id_field)

    return get_responder


def get_responder(
    context: Annotated[ResponseContext, Depends(get_response_context)],
) -> ApiResponder:
    """Responder for endpoints that embed nothing."""
    return ApiResponder(context)


# Type aliases for cleaner function signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Context = Annotated[ResponseContext, Depends(get_response_context)]
Responder = Annotated[ApiResponder, Depends(get_responder)]
