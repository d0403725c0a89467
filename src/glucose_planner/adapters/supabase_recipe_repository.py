"""Supabase repository and catalog for locally stored recipes."""

import asyncio
from dataclasses import asdict, dataclass

from supabase import Client

from glucose_planner.adapters.supabase_support import execute
from glucose_planner.domain.errors import CatalogUnavailableError
from glucose_planner.domain.recipes import Recipe
from glucose_planner.services.catalog import CatalogSort, RecipeCatalog
from glucose_planner.services.plans import RecipeRepository

_COLUMNS = (
    "id, name, category, calories, carbs, protein, fat, fiber, sugar, sodium, "
    "difficulty, prep_time, cook_time, image_url, tags, ingredients, instructions"
)


@dataclass
class SupabaseRecipeRepository(RecipeRepository, RecipeCatalog):
    """Reads the ``recipes`` table for lookups and catalog searches."""

    client: Client

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe row by id."""
        response = execute(
            self.client.table("recipes").select(_COLUMNS).eq("id", recipe_id).limit(1),
            "get_recipe",
        )
        if not response.data:
            return None
        return recipe_from_row(response.data[0])

    async def search_recipes(  # noqa: PLR0913
        self,
        category: str,
        max_carbs: int,
        sort: CatalogSort,
        *,
        max_sugar: float | None = None,
        limit: int = 20,
    ) -> list[Recipe]:
        """Search recipes by category under a carb ceiling."""
        return await asyncio.to_thread(
            self._search, category, max_carbs, sort, max_sugar, limit
        )

    def _search(  # noqa: PLR0913
        self,
        category: str,
        max_carbs: int,
        sort: CatalogSort,
        max_sugar: float | None,
        limit: int,
    ) -> list[Recipe]:
        query = (
            self.client.table("recipes")
            .select(_COLUMNS)
            .eq("category", str(category))
            .lte("carbs", max_carbs)
        )
        if max_sugar is not None:
            query = query.lte("sugar", max_sugar)
        if sort is CatalogSort.CARBS:
            query = query.order("carbs", desc=False)
        else:
            query = query.order("name", desc=False)
        response = execute(
            query.limit(limit), "search_recipes", CatalogUnavailableError
        )
        return [recipe_from_row(row) for row in response.data or []]


def recipe_from_row(row: dict[str, object]) -> Recipe:
    """Build a recipe from a table row or a stored snapshot."""
    ready = row.get("ready_in_minutes")
    if ready is None and (row.get("prep_time") or row.get("cook_time")):
        ready = int(row.get("prep_time") or 0) + int(row.get("cook_time") or 0)
    return Recipe(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        category=str(row.get("category", "")),
        calories=_to_float(row.get("calories")),
        carbs=_to_float(row.get("carbs")),
        protein=_to_float(row.get("protein")),
        fat=_to_float(row.get("fat")),
        fiber=_to_float(row.get("fiber")),
        sugar=_to_float(row.get("sugar")),
        sodium=_to_float(row.get("sodium")),
        difficulty=str(row.get("difficulty") or "easy"),
        ready_in_minutes=int(ready) if ready is not None else None,
        image_url=row.get("image_url"),
        source_url=row.get("source_url"),
        tags=tuple(row.get("tags") or ()),
        ingredients=tuple(row.get("ingredients") or ()),
        instructions=tuple(row.get("instructions") or ()),
    )


def recipe_snapshot(recipe: Recipe) -> dict[str, object]:
    """Serialize a recipe for storage in a JSON column."""
    snapshot = asdict(recipe)
    snapshot["category"] = str(recipe.category)
    snapshot["tags"] = list(recipe.tags)
    snapshot["ingredients"] = list(recipe.ingredients)
    snapshot["instructions"] = list(recipe.instructions)
    return snapshot


def _to_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0
