"""Embed (relationship include) resolution.

The active embed set for a request is::

    (possible ∩ requested) ∪ permanent

Unknown or non-whitelisted names are dropped without error. Permanent embeds
are always present, even when they are not listed as possible.
"""

from dataclasses import dataclass
from typing import Iterable

PATH_SEPARATOR = "."
SCOPE_SEPARATOR = "_"


def parse_embed_list(requested: str | Iterable[str] | None) -> tuple[str, ...]:
    """Split a comma-separated embed parameter into ordered, unique names.

    Args:
        requested: Raw ``embed`` query value, or already-split names

    Returns:
        Trimmed names in first-seen order, empties removed
    """
    if requested is None:
        return ()
    if isinstance(requested, str):
        requested = requested.split(",")

    names: list[str] = []
    for name in requested:
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def sanitize_scope(path: str) -> str:
    """Turn a dotted relationship path into a scope name (``a.b`` -> ``a_b``)."""
    return path.replace(PATH_SEPARATOR, SCOPE_SEPARATOR)


@dataclass(frozen=True)
class EmbedSpec:
    """Embeds an endpoint allows (``possible``) and always adds (``permanent``)."""

    possible: tuple[str, ...] = ()
    permanent: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable of names but store them as ordered tuples
        object.__setattr__(self, "possible", parse_embed_list(self.possible))
        object.__setattr__(self, "permanent", parse_embed_list(self.permanent))


@dataclass(frozen=True)
class ResolvedEmbeds:
    """Active embeds for one request.

    ``active`` holds the dotted paths handed to transformers and repositories;
    ``scopes`` holds the same paths sanitized for scope naming.
    """

    active: tuple[str, ...] = ()

    @property
    def scopes(self) -> tuple[str, ...]:
        return tuple(sanitize_scope(path) for path in self.active)

    def __contains__(self, name: object) -> bool:
        return name in self.active

    def __iter__(self):
        return iter(self.active)

    def __len__(self) -> int:
        return len(self.active)

    def includes(self, name: str) -> bool:
        """Whether ``name`` is active directly or through a dotted child path."""
        prefix = name + PATH_SEPARATOR
        return any(path == name or path.startswith(prefix) for path in self.active)

    def nested(self, name: str) -> "ResolvedEmbeds":
        """Active paths below ``name`` with the ``name.`` prefix removed."""
        prefix = name + PATH_SEPARATOR
        children = tuple(path[len(prefix):] for path in self.active if path.startswith(prefix))
        return ResolvedEmbeds(active=parse_embed_list(children))

    def relation_paths(self) -> list[tuple[str, ...]]:
        """Active paths split into relation chains, for eager loading."""
        return [tuple(path.split(PATH_SEPARATOR)) for path in self.active]


def resolve_embeds(
    requested: str | Iterable[str] | None,
    possible: Iterable[str],
    permanent: Iterable[str] = (),
) -> ResolvedEmbeds:
    """Resolve the active embed set for a request.

    Args:
        requested: Comma-separated ``embed`` value (or names) from the caller
        possible: Embeds the endpoint allows, in declared order
        permanent: Embeds the endpoint always includes

    Returns:
        ResolvedEmbeds ordered as ``possible`` first, then permanent-only names
    """
    wanted = set(parse_embed_list(requested))
    active = [name for name in parse_embed_list(possible) if name in wanted]
    for name in parse_embed_list(permanent):
        if name not in active:
            active.append(name)
    return ResolvedEmbeds(active=tuple(active))


def resolve_spec(requested: str | Iterable[str] | None, spec: EmbedSpec) -> ResolvedEmbeds:
    """Resolve the active embed set against an endpoint's EmbedSpec."""
    return resolve_embeds(requested, spec.possible, spec.permanent)
