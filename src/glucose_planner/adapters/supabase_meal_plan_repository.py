"""Supabase repository for meal plans."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from glucose_planner.adapters.supabase_recipe_repository import (
    recipe_from_row,
    recipe_snapshot,
)
from glucose_planner.adapters.supabase_support import execute
from glucose_planner.domain.errors import StoreUnavailableError
from glucose_planner.domain.plans import MealPlan, PlanTotals
from glucose_planner.domain.recipes import PLAN_SLOTS, Recipe
from glucose_planner.services.plans import MealPlanRepository


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation storing one row per user and date.

    Slot recipes are stored as id plus a JSON snapshot so totals can be
    recomputed without joining the catalog.
    """

    client: Client

    def get_meal_plan(self, user_id: UUID, plan_date: date) -> MealPlan | None:
        """Return the plan row for a user and date."""
        response = execute(
            self.client.table("meal_plans")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("plan_date", plan_date.isoformat())
            .limit(1),
            "get_meal_plan",
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])

    def put_meal_plan(self, plan: MealPlan) -> None:
        """Upsert the whole plan row."""
        payload: dict[str, object] = {
            "user_id": str(plan.user_id),
            "plan_date": plan.plan_date.isoformat(),
            "snacks": plan.snacks,
            "reminders": plan.reminders,
            "total_calories": plan.totals.calories,
            "total_carbs": plan.totals.carbs,
            "total_protein": plan.totals.protein,
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        for slot in PLAN_SLOTS:
            recipe = plan.recipe_for(slot)
            payload[f"{slot.value}_recipe_id"] = recipe.id if recipe else None
            payload[f"{slot.value}_recipe"] = (
                recipe_snapshot(recipe) if recipe else None
            )
        response = execute(
            self.client.table("meal_plans").upsert(
                payload, on_conflict="user_id,plan_date"
            ),
            "put_meal_plan",
        )
        if not response.data:
            raise StoreUnavailableError("Failed to write meal plan")


def _parse_plan(row: dict[str, object]) -> MealPlan:
    slots: dict[str, Recipe | None] = {}
    for slot in PLAN_SLOTS:
        snapshot = row.get(f"{slot.value}_recipe")
        slots[slot.value] = recipe_from_row(snapshot) if snapshot else None
    return MealPlan(
        user_id=UUID(str(row["user_id"])),
        plan_date=date.fromisoformat(str(row["plan_date"])),
        snacks=list(row.get("snacks") or []),
        reminders=list(row.get("reminders") or []),
        totals=PlanTotals(
            calories=float(row.get("total_calories") or 0.0),
            carbs=float(row.get("total_carbs") or 0.0),
            protein=float(row.get("total_protein") or 0.0),
        ),
        **slots,
    )
