"""Repositories for lookup (reference) tables."""

from typing import Any, ClassVar

from api_base.repositories.base import ModelT, Repository

SELECT_PLACEHOLDER = "-- Please Select --"


class LookupRepository(Repository[ModelT]):
    """Repository for small ``id``/``name`` tables used in select lists.

    ``mass_managed`` marks tables that admin screens may edit in bulk;
    ``mass_columns`` lists the extra columns those screens show.
    """

    mass_managed: ClassVar[bool] = False
    mass_columns: ClassVar[tuple[str, ...]] = ()
    label_column: ClassVar[str] = "name"

    async def get_all_for_select(self, order_by: str | None = None) -> dict[Any, str]:
        """Options for a select input, led by an empty placeholder.

        Returns:
            ``{"": "-- Please Select --", <id>: <name>, ...}`` in order
        """
        options: dict[Any, str] = {"": SELECT_PLACEHOLDER}
        for row in await self.get_all(order_by or self.label_column):
            options[getattr(row, self.id_column)] = getattr(row, self.label_column)
        return options

    def can_be_mass_managed(self) -> bool:
        return self.mass_managed

    def additional_mass_columns(self) -> list[str]:
        return list(self.mass_columns)
