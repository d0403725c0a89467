"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from glucose_planner.config import Settings
from glucose_planner.containers import AppContainer
from glucose_planner.domain.errors import CatalogUnavailableError, StoreUnavailableError
from glucose_planner.domain.glucose import GlucoseReading
from glucose_planner.domain.plans import MealPlan
from glucose_planner.domain.profiles import DiabetesProfile
from glucose_planner.domain.recipes import Recipe
from glucose_planner.services.catalog import CatalogSort, RecipeCatalog
from glucose_planner.services.glucose import GlucoseRepository, GlucoseService
from glucose_planner.services.plans import (
    MealPlanRepository,
    MealPlanService,
    RecipeRepository,
)
from glucose_planner.services.profiles import ProfileRepository, ProfileService
from glucose_planner.services.recommendations import RecommendationService


def make_recipe(  # noqa: PLR0913
    recipe_id: int,
    name: str,
    category: str = "lunch",
    carbs: float = 20,
    calories: float = 300,
    protein: float = 15,
) -> Recipe:
    return Recipe(
        id=recipe_id,
        name=name,
        category=category,
        carbs=carbs,
        calories=calories,
        protein=protein,
    )


def make_readings(values: list[int]) -> list[GlucoseReading]:
    """Build readings most recent first, one hour apart."""
    now = datetime.now(tz=UTC)
    return [
        GlucoseReading(value=value, measured_at=now - timedelta(hours=index))
        for index, value in enumerate(values)
    ]


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, DiabetesProfile] = field(default_factory=dict)
    fail: bool = False

    def get_profile(self, user_id: UUID) -> DiabetesProfile | None:
        if self.fail:
            raise StoreUnavailableError("profiles offline")
        return self.profiles.get(user_id)


@dataclass
class InMemoryGlucoseRepository(GlucoseRepository):
    """In-memory glucose repository for tests."""

    readings: dict[UUID, list[GlucoseReading]] = field(default_factory=dict)
    fail: bool = False

    def create_reading(self, user_id: UUID, reading: GlucoseReading) -> GlucoseReading:
        stored = GlucoseReading(
            id=uuid4(),
            user_id=user_id,
            value=reading.value,
            measured_at=reading.measured_at,
            context=reading.context,
            note=reading.note,
        )
        self.readings.setdefault(user_id, []).append(stored)
        return stored

    def list_readings(self, user_id: UUID, window_days: int) -> list[GlucoseReading]:
        if self.fail:
            raise StoreUnavailableError("glucose_logs offline")
        start = datetime.now(tz=UTC) - timedelta(days=window_days)
        rows = [
            reading
            for reading in self.readings.get(user_id, [])
            if reading.measured_at >= start
        ]
        return sorted(rows, key=lambda reading: reading.measured_at, reverse=True)


@dataclass
class InMemoryMealPlanRepository(MealPlanRepository):
    """In-memory meal plan repository for tests."""

    plans: dict[tuple[UUID, date], MealPlan] = field(default_factory=dict)
    fail_writes: bool = False
    writes: int = 0

    def get_meal_plan(self, user_id: UUID, plan_date: date) -> MealPlan | None:
        return self.plans.get((user_id, plan_date))

    def put_meal_plan(self, plan: MealPlan) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("meal_plans offline")
        self.writes += 1
        self.plans[(plan.user_id, plan.plan_date)] = plan


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe lookup for tests."""

    recipes: dict[int, Recipe] = field(default_factory=dict)

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        return self.recipes.get(recipe_id)


@dataclass
class FakeRecipeCatalog(RecipeCatalog):
    """Catalog that filters a fixed recipe list and records each query."""

    recipes: list[Recipe] = field(default_factory=list)
    responses: list[list[Recipe] | Exception] | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def search_recipes(  # noqa: PLR0913
        self,
        category: str,
        max_carbs: int,
        sort: CatalogSort,
        *,
        max_sugar: float | None = None,
        limit: int = 20,
    ) -> list[Recipe]:
        self.calls.append(
            {
                "category": str(category),
                "max_carbs": max_carbs,
                "sort": sort,
                "max_sugar": max_sugar,
                "limit": limit,
            }
        )
        if self.responses is not None:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        matches = [
            recipe
            for recipe in self.recipes
            if recipe.category == category
            and recipe.carbs <= max_carbs
            and (max_sugar is None or recipe.sugar <= max_sugar)
        ]
        key = (
            (lambda recipe: recipe.carbs)
            if sort is CatalogSort.CARBS
            else (lambda recipe: recipe.name)
        )
        return sorted(matches, key=key)[:limit]


@dataclass
class FailingRecipeCatalog(RecipeCatalog):
    """Catalog that is always unavailable."""

    calls: int = 0

    async def search_recipes(  # noqa: PLR0913
        self,
        category: str,
        max_carbs: int,
        sort: CatalogSort,
        *,
        max_sugar: float | None = None,
        limit: int = 20,
    ) -> list[Recipe]:
        self.calls += 1
        raise CatalogUnavailableError("catalog offline")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def glucose_repository() -> InMemoryGlucoseRepository:
    return InMemoryGlucoseRepository()


@pytest.fixture
def meal_plan_repository() -> InMemoryMealPlanRepository:
    return InMemoryMealPlanRepository()


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository(
        recipes={
            10: make_recipe(10, "Veggie Omelette", "breakfast", 12, 280, 20),
            20: make_recipe(20, "Lentil Soup", "lunch", 30, 350, 18),
            30: make_recipe(30, "Baked Salmon", "dinner", 8, 420, 34),
        }
    )


@pytest.fixture
def catalog() -> FakeRecipeCatalog:
    return FakeRecipeCatalog(
        recipes=[
            make_recipe(10, "Veggie Omelette", "breakfast", 12, 280, 20),
            make_recipe(11, "Berry Oats", "breakfast", 38, 310, 9),
            make_recipe(20, "Lentil Soup", "lunch", 30, 350, 18),
            make_recipe(21, "Chicken Wrap", "lunch", 25, 410, 28),
            make_recipe(30, "Baked Salmon", "dinner", 8, 420, 34),
        ]
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    profile_repository: InMemoryProfileRepository,
    glucose_repository: InMemoryGlucoseRepository,
    meal_plan_repository: InMemoryMealPlanRepository,
    recipe_repository: InMemoryRecipeRepository,
    catalog: FakeRecipeCatalog,
) -> AppContainer:
    profile_service = ProfileService(profile_repository)
    glucose_service = GlucoseService(
        repository=glucose_repository,
        profile_service=profile_service,
    )
    recommendation_service = RecommendationService(
        profile_repository=profile_repository,
        glucose_repository=glucose_repository,
        catalog=catalog,
    )
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        recipe_repository=recipe_repository,
        recommendation_service=recommendation_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=profile_service,
        glucose_service=glucose_service,
        recommendation_service=recommendation_service,
        meal_plan_service=meal_plan_service,
        close_resources=close_resources,
    )
