"""Data-access repositories feeding cursor-paginated responses."""

from api_base.repositories.base import Repository
from api_base.repositories.lookup import SELECT_PLACEHOLDER, LookupRepository

__all__ = ["LookupRepository", "Repository", "SELECT_PLACEHOLDER"]
