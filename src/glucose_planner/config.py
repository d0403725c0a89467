"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

RECIPE_CATALOGS = {"supabase", "spoonacular"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    recipe_catalog: str = "supabase"
    spoonacular_api_key: str | None = None
    spoonacular_base_url: str = "https://api.spoonacular.com/recipes"
    catalog_timeout_seconds: float = 8.0
    catalog_page_size: int = 20
    catalog_cache_ttl_seconds: int = 900
    glucose_window_days: int = 7
    recommendation_count: int = 4
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_recipe_catalog(raw: str | None) -> str:
    """Normalize the configured recipe catalog name."""
    cleaned = (raw or "supabase").strip().lower()
    if cleaned not in RECIPE_CATALOGS:
        raise ValueError(
            f"Unknown recipe catalog {raw!r}; expected one of "
            f"{', '.join(sorted(RECIPE_CATALOGS))}"
        )
    return cleaned
