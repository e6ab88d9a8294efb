"""Async SQLAlchemy repository producing cursor-ordered pages."""

from datetime import datetime, timezone
from typing import Any, Generic, Iterable, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api_base.core.embeds import ResolvedEmbeds, parse_embed_list
from api_base.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


def utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


class Repository(Generic[ModelT]):
    """Repository for a mapped model with an integer ``id`` primary key.

    Subclasses set ``model``::

        class PostRepository(Repository[Post]):
            model = Post
    """

    model: type[ModelT]
    id_column: str = "id"
    soft_delete_column: str = "deleted_at"

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    @property
    def _id(self):
        return getattr(self.model, self.id_column)

    @property
    def soft_deletes(self) -> bool:
        return hasattr(self.model, self.soft_delete_column)

    def _base_query(self, with_trashed: bool = False) -> Select:
        query = select(self.model)
        if self.soft_deletes and not with_trashed:
            query = query.where(getattr(self.model, self.soft_delete_column).is_(None))
        return query

    def eager_load_options(self, embeds: ResolvedEmbeds | Iterable[str] | None) -> list[Any]:
        """Build ``selectinload`` chains for active embed paths.

        Path segments that are not relationships of the model are skipped, so
        an embed served from a plain attribute does not break the query.
        """
        if embeds is None:
            return []
        if not isinstance(embeds, ResolvedEmbeds):
            embeds = ResolvedEmbeds(active=parse_embed_list(embeds))

        options: list[Any] = []
        for chain in embeds.relation_paths():
            option = None
            entity: Any = self.model
            for name in chain:
                attr = getattr(entity, name, None)
                prop = getattr(attr, "property", None)
                mapper = getattr(prop, "mapper", None)
                if mapper is None:
                    break
                option = selectinload(attr) if option is None else option.selectinload(attr)
                entity = mapper.class_
            if option is not None:
                options.append(option)
        return options

    async def get_by_id(
        self,
        record_id: int,
        embeds: ResolvedEmbeds | Iterable[str] | None = None,
    ) -> ModelT | None:
        """Get a record by ID.

        Args:
            record_id: Primary key
            embeds: Relationships to load eagerly

        Returns:
            Model or None if not found
        """
        query = self._base_query().where(self._id == record_id)
        query = query.options(*self.eager_load_options(embeds))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_all(self, order_by: str | None = None) -> list[ModelT]:
        """Get every record, optionally ordered by a column name."""
        query = self._base_query()
        if order_by:
            query = query.order_by(getattr(self.model, order_by))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def paginate(
        self,
        limit: int,
        current_cursor: int | None = None,
        order_by: str | None = None,
        embeds: ResolvedEmbeds | Iterable[str] | None = None,
    ) -> list[ModelT]:
        """Fetch one page of records after a cursor position.

        Args:
            limit: Page size
            current_cursor: Decoded cursor; only records with a greater ID
                are returned. None starts from the beginning.
            order_by: Column to order by instead of the ID
            embeds: Relationships to load eagerly

        Returns:
            Up to ``limit`` records, ordered by ID unless ``order_by`` is given
        """
        query = self._base_query()
        if current_cursor is not None:
            query = query.where(self._id > current_cursor)

        order_column = getattr(self.model, order_by) if order_by else self._id
        query = query.order_by(order_column).limit(limit)
        query = query.options(*self.eager_load_options(embeds))

        result = await self.session.execute(query)
        records = list(result.scalars().all())
        logger.debug(
            "page_fetched",
            model=self.model.__name__,
            cursor=current_cursor,
            limit=limit,
            count=len(records),
        )
        return records

    def new_instance(self, attributes: dict[str, Any] | None = None) -> ModelT:
        """Build an unsaved model instance."""
        return self.model(**(attributes or {}))

    async def create(self, attributes: dict[str, Any] | None = None) -> ModelT:
        """Insert a new record and flush to obtain its ID."""
        record = self.new_instance(attributes)
        self.session.add(record)
        await self.session.flush()
        return record

    async def update_with_id(self, record_id: int, values: dict[str, Any]) -> ModelT | None:
        """Update a record's attributes.

        Returns:
            Updated model, or None if not found
        """
        record = await self.get_by_id(record_id)
        if record is None:
            return None
        for key, value in values.items():
            setattr(record, key, value)
        await self.session.flush()
        return record

    async def delete_by_id(self, record_id: int) -> bool:
        """Delete a record; soft-deletes when the model has ``deleted_at``.

        Returns:
            True if a record was deleted
        """
        record = await self.get_by_id(record_id)
        if record is None:
            return False
        if self.soft_deletes:
            setattr(record, self.soft_delete_column, utc_now())
        else:
            await self.session.delete(record)
        await self.session.flush()
        return True

    async def restore_by_id(self, record_id: int) -> bool:
        """Restore a soft-deleted record.

        Returns:
            True if a soft-deleted record was restored
        """
        if not self.soft_deletes:
            return False
        query = self._base_query(with_trashed=True).where(self._id == record_id)
        result = await self.session.execute(query)
        record = result.scalar_one_or_none()
        if record is None or getattr(record, self.soft_delete_column) is None:
            return False
        setattr(record, self.soft_delete_column, None)
        await self.session.flush()
        return True

    @staticmethod
    def unset_if_empty(data: dict[str, Any], keys: Sequence[str]) -> dict[str, Any]:
        """Replace blank string values for ``keys`` with None."""
        cleaned = dict(data)
        for key in keys:
            if key in cleaned and cleaned[key] is not None and str(cleaned[key]).strip() == "":
                cleaned[key] = None
        return cleaned
