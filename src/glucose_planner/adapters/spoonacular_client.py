"""Spoonacular recipe catalog client."""

from dataclasses import dataclass

import httpx

from glucose_planner.domain.errors import CatalogUnavailableError
from glucose_planner.domain.recipes import Recipe
from glucose_planner.services.catalog import CatalogSort, RecipeCatalog

_NUTRIENT_FIELDS = {
    "Calories": "calories",
    "Carbohydrates": "carbs",
    "Protein": "protein",
    "Fat": "fat",
    "Fiber": "fiber",
    "Sugar": "sugar",
    "Sodium": "sodium",
}


@dataclass
class HttpxSpoonacularCatalog(RecipeCatalog):
    """HTTPX-backed Spoonacular ``complexSearch`` catalog."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 15.0
    ) -> "HttpxSpoonacularCatalog":
        """Create a catalog client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
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
        """Search recipes of a meal type under a carb ceiling."""
        params: dict[str, str | int | float] = {
            "apiKey": self.api_key,
            "number": limit,
            "type": str(category),
            "maxCarbs": max_carbs,
            "addRecipeNutrition": "true",
        }
        if max_sugar is not None:
            params["maxSugar"] = max_sugar
        if sort is CatalogSort.CARBS:
            params["sort"] = "carbs"
            params["sortDirection"] = "asc"

        try:
            response = await self.http_client.get(
                f"{self.base_url}/complexSearch",
                params=params,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise CatalogUnavailableError(
                f"Spoonacular search failed: {exc}"
            ) from exc

        recipes = [
            _parse_recipe(result, str(category))
            for result in payload.get("results") or []
        ]
        if sort is CatalogSort.NAME:
            recipes.sort(key=lambda recipe: recipe.name.lower())
        return recipes

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _parse_recipe(result: dict[str, object], category: str) -> Recipe:
    nutrition = result.get("nutrition") or {}
    values = dict.fromkeys(_NUTRIENT_FIELDS.values(), 0.0)
    for nutrient in nutrition.get("nutrients") or []:
        field_name = _NUTRIENT_FIELDS.get(nutrient.get("name"))
        amount = nutrient.get("amount")
        if field_name and isinstance(amount, int | float):
            values[field_name] = float(amount)
    return Recipe(
        id=int(result["id"]),
        name=str(result.get("title", "")),
        category=category,
        ready_in_minutes=result.get("readyInMinutes"),
        image_url=result.get("image"),
        source_url=result.get("sourceUrl"),
        tags=tuple(result.get("diets") or ()),
        **values,
    )
