"""Resource transformers: domain records to plain attribute trees."""

from typing import Any, Callable, ClassVar, Iterable, Mapping, Sequence

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from api_base.core.embeds import ResolvedEmbeds
from api_base.core.messages import flatten_messages, join_messages, style_for


class _Absent:
    """Marker for a relationship the record does not carry."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

RelationLoader = Callable[[Any, str], Any]


def load_relation(record: Any, name: str) -> Any:
    """Return the in-memory value of a relationship, or ABSENT.

    Mappings are read by key and objects by attribute. SQLAlchemy instances
    are never lazy-loaded: an unloaded relationship counts as absent.
    """
    if isinstance(record, Mapping):
        return record.get(name, ABSENT)

    try:
        state = sa_inspect(record)
    except NoInspectionAvailable:
        state = None
    if state is not None and name in getattr(state, "unloaded", ()):
        return ABSENT

    return getattr(record, name, ABSENT)


def record_identifier(record: Any, field: str = "id") -> Any:
    """Read the pagination identifier of a record (mapping key or attribute)."""
    if isinstance(record, Mapping):
        return record[field]
    return getattr(record, field)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (Sequence, set, frozenset)) and not isinstance(
        value, (str, bytes, Mapping)
    )


class Transformer:
    """Base transformer.

    Subclasses implement :meth:`transform` for scalar attributes and declare
    ``relationships`` mapping embed names to the transformer used for the
    related record(s)::

        class PostTransformer(Transformer):
            relationships = {"author": UserTransformer(), "comments": CommentTransformer()}

            def transform(self, post):
                return {"id": post.id, "title": post.title}
    """

    relationships: ClassVar[Mapping[str, "Transformer"]] = {}

    def __init__(self, loader: RelationLoader | None = None):
        self.loader = loader or load_relation

    def transform(self, record: Any) -> dict[str, Any]:
        raise NotImplementedError

    @property
    def available_embeds(self) -> tuple[str, ...]:
        return tuple(self.relationships)

    def get_relationship_transformer(self, name: str) -> "Transformer | None":
        return self.relationships.get(name)

    def transform_item(
        self,
        record: Any,
        embeds: ResolvedEmbeds | None = None,
    ) -> dict[str, Any]:
        """Transform one record and attach the active embeds it carries."""
        embeds = embeds or ResolvedEmbeds()
        data = dict(self.transform(record))

        for name in self.available_embeds:
            if not embeds.includes(name):
                continue
            related = self.loader(record, name)
            if related is ABSENT:
                continue
            nested = self.get_relationship_transformer(name)
            data[name] = nested.transform_related(related, embeds.nested(name))

        return data

    def transform_collection(
        self,
        records: Iterable[Any],
        embeds: ResolvedEmbeds | None = None,
    ) -> list[dict[str, Any]]:
        """Transform records, keeping the order they arrived in."""
        return [self.transform_item(record, embeds) for record in records]

    def transform_related(self, related: Any, embeds: ResolvedEmbeds) -> Any:
        """Transform a loaded relationship value (single, sequence or None)."""
        if related is None:
            return None
        if _is_sequence(related):
            return self.transform_collection(related, embeds)
        return self.transform_item(related, embeds)


class CallableTransformer(Transformer):
    """Wrap a plain ``record -> dict`` function as a transformer."""

    def __init__(
        self,
        func: Callable[[Any], Mapping[str, Any]],
        loader: RelationLoader | None = None,
    ):
        super().__init__(loader)
        self.func = func

    def transform(self, record: Any) -> dict[str, Any]:
        return dict(self.func(record))


class AttributeTransformer(Transformer):
    """Copy a fixed list of fields from a record.

    Useful for lookup tables and nested relations that need no formatting.
    """

    fields: ClassVar[tuple[str, ...]] = ("id",)

    def __init__(
        self,
        fields: Iterable[str] | None = None,
        relationships: Mapping[str, Transformer] | None = None,
        loader: RelationLoader | None = None,
    ):
        super().__init__(loader)
        if fields is not None:
            self.fields = tuple(fields)
        if relationships is not None:
            self.relationships = dict(relationships)

    def transform(self, record: Any) -> dict[str, Any]:
        if isinstance(record, Mapping):
            return {name: record.get(name) for name in self.fields}
        return {name: getattr(record, name, None) for name in self.fields}


def as_transformer(transformer: "Transformer | Callable[[Any], Mapping[str, Any]]") -> Transformer:
    """Accept either a Transformer or a bare function."""
    if isinstance(transformer, Transformer):
        return transformer
    return CallableTransformer(transformer)


class MessageTransformer(Transformer):
    """Formats ``{"result", "errors"}`` payloads as notifications."""

    def transform(self, message: Mapping[str, Any]) -> dict[str, Any]:
        errors = message.get("errors")
        result = message.get("result", "success")
        messages = flatten_messages(errors)
        return {
            "notification": {
                "result": result,
                "style": style_for(result),
                "messages": messages,
                "message": join_messages(messages),
            },
            "errors": errors,
        }
