"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from glucose_planner.adapters.spoonacular_client import HttpxSpoonacularCatalog
from glucose_planner.adapters.supabase_glucose_repository import (
    SupabaseGlucoseRepository,
)
from glucose_planner.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from glucose_planner.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from glucose_planner.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from glucose_planner.config import Settings, parse_recipe_catalog
from glucose_planner.services.catalog import CachedRecipeCatalog, RecipeCatalog
from glucose_planner.services.glucose import GlucoseService
from glucose_planner.services.plans import MealPlanService
from glucose_planner.services.profiles import ProfileService
from glucose_planner.services.recommendations import RecommendationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    glucose_service: GlucoseService
    recommendation_service: RecommendationService
    meal_plan_service: MealPlanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    glucose_repository = SupabaseGlucoseRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    meal_plan_repository = SupabaseMealPlanRepository(supabase_client)

    catalog = CachedRecipeCatalog(
        catalog=_build_catalog(resolved_settings, recipe_repository),
        ttl_seconds=resolved_settings.catalog_cache_ttl_seconds,
    )
    profile_service = ProfileService(profile_repository)
    glucose_service = GlucoseService(
        repository=glucose_repository,
        profile_service=profile_service,
        window_days=resolved_settings.glucose_window_days,
    )
    recommendation_service = RecommendationService(
        profile_repository=profile_repository,
        glucose_repository=glucose_repository,
        catalog=catalog,
        window_days=resolved_settings.glucose_window_days,
        default_count=resolved_settings.recommendation_count,
        timeout_seconds=resolved_settings.catalog_timeout_seconds,
        page_size=resolved_settings.catalog_page_size,
    )
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        recipe_repository=recipe_repository,
        recommendation_service=recommendation_service,
    )

    async def close_resources() -> None:
        await catalog.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        glucose_service=glucose_service,
        recommendation_service=recommendation_service,
        meal_plan_service=meal_plan_service,
        close_resources=close_resources,
    )


def _build_catalog(
    settings: Settings, recipe_repository: SupabaseRecipeRepository
) -> RecipeCatalog:
    if parse_recipe_catalog(settings.recipe_catalog) == "spoonacular":
        if not settings.spoonacular_api_key:
            raise ValueError(
                "SPOONACULAR_API_KEY is required for the spoonacular catalog"
            )
        return HttpxSpoonacularCatalog.create(
            api_key=settings.spoonacular_api_key,
            base_url=settings.spoonacular_base_url,
            timeout_seconds=settings.catalog_timeout_seconds,
        )
    return recipe_repository
