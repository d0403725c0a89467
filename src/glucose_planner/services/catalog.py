"""Recipe catalog port and a TTL-caching decorator for it."""

import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from glucose_planner.domain.recipes import Recipe


class CatalogSort(StrEnum):
    """Orderings a catalog must support."""

    CARBS = "carbs"
    NAME = "name"


class RecipeCatalog(Protocol):
    """Read-only recipe search.

    Implementations return an empty list when nothing matches and raise
    ``CatalogUnavailableError`` for transport or availability failures.
    """

    async def search_recipes(  # noqa: PLR0913
        self,
        category: str,
        max_carbs: int,
        sort: CatalogSort,
        *,
        max_sugar: float | None = None,
        limit: int = 20,
    ) -> list[Recipe]:
        """Search recipes in a category under a carb ceiling."""


@dataclass
class _CacheEntry:
    recipes: list[Recipe]
    expires_at: float


@dataclass
class CachedRecipeCatalog(RecipeCatalog):
    """Caches non-empty search results per query shape."""

    catalog: RecipeCatalog
    ttl_seconds: float = 900.0
    _entries: dict[tuple[object, ...], _CacheEntry] = field(
        default_factory=dict, repr=False
    )

    async def search_recipes(  # noqa: PLR0913
        self,
        category: str,
        max_carbs: int,
        sort: CatalogSort,
        *,
        max_sugar: float | None = None,
        limit: int = 20,
    ) -> list[Recipe]:
        """Return cached results or delegate to the wrapped catalog."""
        key = (category, max_carbs, str(sort), max_sugar, limit)
        entry = self._entries.get(key)
        now = time.monotonic()
        if entry is not None and now < entry.expires_at:
            return list(entry.recipes)
        self._entries.pop(key, None)

        recipes = await self.catalog.search_recipes(
            category, max_carbs, sort, max_sugar=max_sugar, limit=limit
        )
        if recipes:
            self._entries[key] = _CacheEntry(
                recipes=list(recipes), expires_at=now + self.ttl_seconds
            )
        return recipes

    async def close(self) -> None:
        """Close the wrapped catalog when it owns resources."""
        close = getattr(self.catalog, "close", None)
        if close is not None:
            await close()
