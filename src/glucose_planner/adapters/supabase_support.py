"""Shared helpers for Supabase-backed adapters."""

from collections.abc import Callable
from typing import Any

import httpx
from supabase import PostgrestAPIError

from glucose_planner.domain.errors import GlucosePlannerError, StoreUnavailableError


def execute(
    query: Any,
    action: str,
    error: Callable[[str], GlucosePlannerError] = StoreUnavailableError,
) -> Any:
    """Execute a query builder, translating client failures into domain errors."""
    try:
        return query.execute()
    except (PostgrestAPIError, httpx.HTTPError) as exc:
        raise error(f"Supabase {action} failed: {exc}") from exc
