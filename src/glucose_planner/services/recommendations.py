"""Glucose-aware recipe recommendations with relax-then-fallback policy."""

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol
from uuid import UUID

from glucose_planner.domain.errors import StoreUnavailableError
from glucose_planner.domain.glucose import GlucoseReading
from glucose_planner.domain.profiles import DiabetesProfile
from glucose_planner.domain.recipes import MealSlot, Recipe
from glucose_planner.services.carbs import max_carbs
from glucose_planner.services.catalog import CatalogSort, RecipeCatalog
from glucose_planner.services.glucose import GlucoseRepository
from glucose_planner.services.profiles import ProfileRepository
from glucose_planner.services.trends import recent_average

ACCEPTANCE_TOLERANCE_CARBS = 5
RELAXED_EXTRA_CARBS = 10
STRICT_MAX_SUGAR = 15.0
CARB_SORT_AVERAGE = 140

_logger = logging.getLogger(__name__)

FALLBACK_RECIPES: tuple[Recipe, ...] = (
    Recipe(
        id=1,
        name="Avocado Toast with Eggs",
        category=MealSlot.BREAKFAST,
        calories=250,
        carbs=15,
        protein=12,
        sugar=2,
        ready_in_minutes=10,
        tags=("fallback",),
    ),
    Recipe(
        id=2,
        name="Grilled Chicken Salad",
        category=MealSlot.LUNCH,
        calories=320,
        carbs=18,
        protein=35,
        sugar=5,
        ready_in_minutes=20,
        tags=("fallback",),
    ),
    Recipe(
        id=3,
        name="Greek Yogurt Bowl",
        category=MealSlot.SNACK,
        calories=280,
        carbs=22,
        protein=20,
        sugar=12,
        ready_in_minutes=5,
        tags=("fallback",),
    ),
    Recipe(
        id=4,
        name="Vegetable Stir-Fry",
        category=MealSlot.DINNER,
        calories=310,
        carbs=28,
        protein=15,
        sugar=8,
        ready_in_minutes=25,
        tags=("fallback",),
    ),
)


class RecommendationSource(StrEnum):
    """Which pipeline step produced a recommendation."""

    CATALOG = "catalog"
    RELAXED = "relaxed"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RecommendationRequest:
    """Inputs shared by every strategy of one pipeline run."""

    meal_slot: str
    ceiling: int
    recent_average: float
    count: int
    page_size: int


@dataclass(frozen=True)
class Recommendation:
    """Recipes plus the step that produced them."""

    recipes: list[Recipe]
    source: RecommendationSource
    ceiling: int


class RecommendationStrategy(Protocol):
    """One step of the recommendation pipeline."""

    source: RecommendationSource
    uses_catalog: bool

    async def attempt(
        self, request: RecommendationRequest, catalog: RecipeCatalog
    ) -> list[Recipe]:
        """Return candidate recipes; empty means try the next step."""


@dataclass(frozen=True)
class StrictCatalogStrategy:
    """Query under the ceiling with a sugar cap, then apply the tolerance."""

    source: RecommendationSource = RecommendationSource.CATALOG
    uses_catalog: bool = True

    async def attempt(
        self, request: RecommendationRequest, catalog: RecipeCatalog
    ) -> list[Recipe]:
        """Run the strict query and keep recipes within the tolerance."""
        sort = (
            CatalogSort.CARBS
            if request.recent_average > CARB_SORT_AVERAGE
            else CatalogSort.NAME
        )
        recipes = await catalog.search_recipes(
            request.meal_slot,
            request.ceiling,
            sort,
            max_sugar=STRICT_MAX_SUGAR,
            limit=request.page_size,
        )
        limit = request.ceiling + ACCEPTANCE_TOLERANCE_CARBS
        return [recipe for recipe in recipes if recipe.carbs <= limit]


@dataclass(frozen=True)
class RelaxedCatalogStrategy:
    """Query again with a raised ceiling and no sugar cap."""

    source: RecommendationSource = RecommendationSource.RELAXED
    uses_catalog: bool = True

    async def attempt(
        self, request: RecommendationRequest, catalog: RecipeCatalog
    ) -> list[Recipe]:
        """Accept whatever the relaxed query returns."""
        sort = (
            CatalogSort.CARBS
            if request.recent_average > CARB_SORT_AVERAGE
            else CatalogSort.NAME
        )
        return await catalog.search_recipes(
            request.meal_slot,
            request.ceiling + RELAXED_EXTRA_CARBS,
            sort,
            limit=request.page_size,
        )


@dataclass(frozen=True)
class LocalFallbackStrategy:
    """Return the fixed local recipe set."""

    source: RecommendationSource = RecommendationSource.FALLBACK
    uses_catalog: bool = False

    async def attempt(
        self, request: RecommendationRequest, catalog: RecipeCatalog
    ) -> list[Recipe]:
        """Return the fallback recipes."""
        return list(FALLBACK_RECIPES)


DEFAULT_STRATEGIES: tuple[RecommendationStrategy, ...] = (
    StrictCatalogStrategy(),
    RelaxedCatalogStrategy(),
    LocalFallbackStrategy(),
)


async def run_pipeline(  # noqa: PLR0913
    meal_slot: str,
    category: str | None,
    insulin_dependent: bool,
    average: float,
    catalog: RecipeCatalog,
    *,
    count: int = 4,
    timeout_seconds: float | None = 8.0,
    page_size: int = 20,
    strategies: tuple[RecommendationStrategy, ...] = DEFAULT_STRATEGIES,
) -> Recommendation:
    """Try each strategy in order until one yields recipes.

    A catalog failure or timeout skips the remaining catalog strategies.
    Catalog errors are never raised to the caller.
    """
    ceiling = max_carbs(category, insulin_dependent, average)
    request = RecommendationRequest(
        meal_slot=str(meal_slot),
        ceiling=ceiling,
        recent_average=average,
        count=max(count, 0),
        page_size=max(page_size, count),
    )
    catalog_failed = False
    for strategy in strategies:
        if strategy.uses_catalog and catalog_failed:
            continue
        try:
            recipes = await asyncio.wait_for(
                strategy.attempt(request, catalog), timeout=timeout_seconds
            )
        except Exception as exc:
            if not strategy.uses_catalog:
                raise
            catalog_failed = True
            _logger.warning(
                "Recipe catalog %s step failed for %s (status=%s): %r",
                strategy.source,
                request.meal_slot,
                _status_code_from_exception(exc),
                exc,
            )
            continue
        if recipes:
            if strategy.source is RecommendationSource.FALLBACK:
                _logger.info("Using fallback recipes for %s", request.meal_slot)
            return Recommendation(
                recipes=list(recipes)[: request.count],
                source=strategy.source,
                ceiling=ceiling,
            )
        _logger.info(
            "Recipe catalog %s step empty for %s (max_carbs=%s)",
            strategy.source,
            request.meal_slot,
            ceiling,
        )

    _logger.info("Using fallback recipes for %s", request.meal_slot)
    return Recommendation(
        recipes=list(FALLBACK_RECIPES)[: request.count],
        source=RecommendationSource.FALLBACK,
        ceiling=ceiling,
    )


async def recommend(  # noqa: PLR0913
    meal_slot: str,
    category: str | None,
    insulin_dependent: bool,
    average: float,
    catalog: RecipeCatalog,
    *,
    count: int = 4,
    timeout_seconds: float | None = 8.0,
) -> list[Recipe]:
    """Return at most ``count`` recipes for a meal slot."""
    result = await run_pipeline(
        meal_slot,
        category,
        insulin_dependent,
        average,
        catalog,
        count=count,
        timeout_seconds=timeout_seconds,
    )
    return result.recipes


def meal_slot_for_hour(hour: int) -> MealSlot:
    """Pick the meal slot that fits a local hour of day."""
    if 6 <= hour < 11:  # noqa: PLR2004
        return MealSlot.BREAKFAST
    if 11 <= hour < 15:  # noqa: PLR2004
        return MealSlot.LUNCH
    if 15 <= hour < 17:  # noqa: PLR2004
        return MealSlot.SNACK
    return MealSlot.DINNER


@dataclass
class RecommendationService:
    """Resolves a user's profile and readings, then runs the pipeline."""

    profile_repository: ProfileRepository
    glucose_repository: GlucoseRepository
    catalog: RecipeCatalog
    window_days: int = 7
    default_count: int = 4
    timeout_seconds: float = 8.0
    page_size: int = 20

    async def recommend_meals(
        self, user_id: UUID, meal_slot: str, count: int | None = None
    ) -> Recommendation:
        """Recommend recipes for a user and meal slot."""
        profile, readings = self._load_inputs(user_id)
        category = profile.diabetes_type if profile else None
        insulin_dependent = profile.insulin_dependent if profile else False
        baseline = profile.average_blood_sugar if profile else None
        return await run_pipeline(
            meal_slot,
            category,
            insulin_dependent,
            recent_average(readings, baseline),
            self.catalog,
            count=self.default_count if count is None else count,
            timeout_seconds=self.timeout_seconds,
            page_size=self.page_size,
        )

    def _load_inputs(
        self, user_id: UUID
    ) -> tuple[DiabetesProfile | None, list[GlucoseReading]]:
        profile: DiabetesProfile | None = None
        readings: list[GlucoseReading] = []
        try:
            profile = self.profile_repository.get_profile(user_id)
        except StoreUnavailableError:
            _logger.warning(
                "Profile store unavailable for %s; using default carb budget",
                user_id,
            )
        try:
            readings = self.glucose_repository.list_readings(
                user_id, self.window_days
            )
        except StoreUnavailableError:
            _logger.warning(
                "Glucose store unavailable for %s; using profile baseline", user_id
            )
        return profile, readings


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    cause = exc.__cause__
    if isinstance(cause, Exception):
        return _status_code_from_exception(cause)
    return "n/a"
