"""Tests for the recommendation pipeline."""

import asyncio
from dataclasses import dataclass

from glucose_planner.domain.errors import CatalogUnavailableError
from glucose_planner.domain.profiles import DiabetesProfile
from glucose_planner.domain.recipes import MealSlot, Recipe
from glucose_planner.services.catalog import CatalogSort
from glucose_planner.services.recommendations import (
    FALLBACK_RECIPES,
    RecommendationService,
    RecommendationSource,
    meal_slot_for_hour,
    recommend,
    run_pipeline,
)
from tests.conftest import (
    FailingRecipeCatalog,
    FakeRecipeCatalog,
    InMemoryGlucoseRepository,
    InMemoryProfileRepository,
    make_readings,
    make_recipe,
)


@dataclass
class SlowRecipeCatalog:
    delay_seconds: float = 1.0

    async def search_recipes(  # type: ignore[no-untyped-def]
        self, *_args, **_kwargs
    ) -> list[Recipe]:
        await asyncio.sleep(self.delay_seconds)
        return [make_recipe(99, "Too Late")]


def test_strict_step_keeps_recipes_within_tolerance() -> None:
    catalog = FakeRecipeCatalog(
        responses=[
            [
                make_recipe(1, "Bean Chili", carbs=50),
                make_recipe(2, "Pasta Bake", carbs=52),
                make_recipe(3, "Tofu Bowl", carbs=30),
            ]
        ]
    )

    result = asyncio.run(run_pipeline("lunch", "type2", True, 100.0, catalog))

    assert result.source is RecommendationSource.CATALOG
    assert result.ceiling == 45
    assert [recipe.id for recipe in result.recipes] == [1, 3]
    assert catalog.calls[0]["max_carbs"] == 45
    assert catalog.calls[0]["max_sugar"] == 15.0


def test_result_is_bounded_by_count() -> None:
    catalog = FakeRecipeCatalog(
        responses=[
            [make_recipe(index, f"Dish {index}", carbs=10) for index in range(8)]
        ]
    )

    recipes = asyncio.run(recommend("dinner", "type1", True, 120.0, catalog, count=3))

    assert len(recipes) == 3
    assert all(recipe.carbs <= 55 for recipe in recipes)


def test_relaxed_step_runs_when_strict_is_empty() -> None:
    catalog = FakeRecipeCatalog(responses=[[], [make_recipe(7, "Rice Bowl", carbs=52)]])

    result = asyncio.run(run_pipeline("lunch", "type2", False, 100.0, catalog))

    assert result.source is RecommendationSource.RELAXED
    assert [recipe.id for recipe in result.recipes] == [7]
    assert len(catalog.calls) == 2
    assert catalog.calls[1]["max_carbs"] == 45
    assert catalog.calls[1]["max_sugar"] is None


def test_relaxed_step_runs_when_tolerance_filters_everything() -> None:
    catalog = FakeRecipeCatalog(
        responses=[
            [make_recipe(1, "Heavy Pasta", carbs=70)],
            [make_recipe(2, "Lighter Pasta", carbs=44)],
        ]
    )

    result = asyncio.run(run_pipeline("dinner", "type2", False, 100.0, catalog))

    assert result.source is RecommendationSource.RELAXED
    assert result.recipes[0].id == 2


def test_fallback_when_catalog_has_nothing() -> None:
    catalog = FakeRecipeCatalog(responses=[[], []])

    result = asyncio.run(run_pipeline("lunch", "type2", False, 100.0, catalog))

    assert result.source is RecommendationSource.FALLBACK
    assert result.recipes == list(FALLBACK_RECIPES)


def test_fallback_on_catalog_error_skips_relaxed_step() -> None:
    catalog = FailingRecipeCatalog()

    result = asyncio.run(
        run_pipeline("breakfast", "type1", True, 100.0, catalog, count=2)
    )

    assert catalog.calls == 1
    assert result.source is RecommendationSource.FALLBACK
    assert result.recipes == list(FALLBACK_RECIPES[:2])


def test_error_after_empty_strict_step_falls_back() -> None:
    catalog = FakeRecipeCatalog(responses=[[], CatalogUnavailableError("boom")])

    result = asyncio.run(run_pipeline("lunch", "type2", False, 100.0, catalog))

    assert result.source is RecommendationSource.FALLBACK


def test_timeout_falls_back() -> None:
    catalog = SlowRecipeCatalog()

    result = asyncio.run(
        run_pipeline("lunch", "type2", False, 100.0, catalog, timeout_seconds=0.01)
    )

    assert result.source is RecommendationSource.FALLBACK


def test_high_average_sorts_by_carbs() -> None:
    catalog = FakeRecipeCatalog(responses=[[], []])

    asyncio.run(run_pipeline("lunch", "type2", False, 150.0, catalog))

    assert [call["sort"] for call in catalog.calls] == [
        CatalogSort.CARBS,
        CatalogSort.CARBS,
    ]
    assert catalog.calls[0]["max_carbs"] == 25


def test_normal_average_sorts_by_name() -> None:
    catalog = FakeRecipeCatalog(responses=[[make_recipe(1, "Soup", carbs=10)]])

    asyncio.run(run_pipeline("lunch", "type2", False, 140.0, catalog))

    assert catalog.calls[0]["sort"] is CatalogSort.NAME


def test_page_size_is_at_least_count() -> None:
    catalog = FakeRecipeCatalog(responses=[[make_recipe(1, "Soup", carbs=10)]])

    asyncio.run(
        run_pipeline("lunch", None, False, 100.0, catalog, count=30, page_size=20)
    )

    assert catalog.calls[0]["limit"] == 30


def test_meal_slot_for_hour() -> None:
    assert meal_slot_for_hour(7) is MealSlot.BREAKFAST
    assert meal_slot_for_hour(12) is MealSlot.LUNCH
    assert meal_slot_for_hour(16) is MealSlot.SNACK
    assert meal_slot_for_hour(19) is MealSlot.DINNER
    assert meal_slot_for_hour(2) is MealSlot.DINNER


def test_service_uses_profile_and_recent_readings(
    user_id, catalog: FakeRecipeCatalog
) -> None:
    profiles = InMemoryProfileRepository(
        profiles={
            user_id: DiabetesProfile(
                user_id=user_id, diabetes_type="Type 1", insulin_dependent=True
            )
        }
    )
    glucose = InMemoryGlucoseRepository(readings={user_id: make_readings([190, 185])})
    service = RecommendationService(
        profile_repository=profiles, glucose_repository=glucose, catalog=catalog
    )

    result = asyncio.run(service.recommend_meals(user_id, MealSlot.BREAKFAST))

    assert result.ceiling == 35
    assert result.source is RecommendationSource.CATALOG
    assert [recipe.name for recipe in result.recipes] == ["Veggie Omelette"]
    assert catalog.calls[0]["sort"] is CatalogSort.CARBS


def test_service_uses_profile_baseline_without_readings(
    user_id, catalog: FakeRecipeCatalog
) -> None:
    profiles = InMemoryProfileRepository(
        profiles={
            user_id: DiabetesProfile(
                user_id=user_id, diabetes_type="type2", average_blood_sugar=70
            )
        }
    )
    service = RecommendationService(
        profile_repository=profiles,
        glucose_repository=InMemoryGlucoseRepository(),
        catalog=catalog,
    )

    result = asyncio.run(service.recommend_meals(user_id, MealSlot.LUNCH, count=1))

    assert result.ceiling == 45
    assert len(result.recipes) == 1


def test_service_store_failure_uses_default_budget(
    user_id, catalog: FakeRecipeCatalog
) -> None:
    service = RecommendationService(
        profile_repository=InMemoryProfileRepository(fail=True),
        glucose_repository=InMemoryGlucoseRepository(),
        catalog=catalog,
    )

    result = asyncio.run(service.recommend_meals(user_id, MealSlot.BREAKFAST))

    assert result.ceiling == 45
    assert [recipe.name for recipe in result.recipes] == [
        "Berry Oats",
        "Veggie Omelette",
    ]


def test_service_keeps_profile_when_readings_are_unavailable(
    user_id, catalog: FakeRecipeCatalog
) -> None:
    profiles = InMemoryProfileRepository(
        {user_id: DiabetesProfile(user_id=user_id, diabetes_type="type2")}
    )
    service = RecommendationService(
        profile_repository=profiles,
        glucose_repository=InMemoryGlucoseRepository(fail=True),
        catalog=catalog,
    )

    result = asyncio.run(service.recommend_meals(user_id, MealSlot.LUNCH))

    assert result.ceiling == 35
    assert catalog.calls[0]["max_carbs"] == 35
