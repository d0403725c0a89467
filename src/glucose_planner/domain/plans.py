"""Meal plan domain models."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from glucose_planner.domain.recipes import MealSlot, Recipe


@dataclass(frozen=True)
class PlanTotals:
    """Aggregate nutrition over the filled slots of a plan."""

    calories: float
    carbs: float
    protein: float


@dataclass(frozen=True)
class MealPlan:
    """One user's plan for one date."""

    user_id: UUID
    plan_date: date
    breakfast: Recipe | None = None
    lunch: Recipe | None = None
    dinner: Recipe | None = None
    snacks: list[dict[str, object]] = field(default_factory=list)
    reminders: list[dict[str, object]] = field(default_factory=list)
    totals: PlanTotals = PlanTotals(0.0, 0.0, 0.0)

    def recipe_for(self, slot: MealSlot) -> Recipe | None:
        """Return the recipe assigned to a slot."""
        return getattr(self, slot.value)
