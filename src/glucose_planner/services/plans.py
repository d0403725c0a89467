"""Day plan assembly with totals recomputed on every slot change."""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from glucose_planner.domain.errors import RecipeNotFoundError
from glucose_planner.domain.plans import MealPlan, PlanTotals
from glucose_planner.domain.recipes import PLAN_SLOTS, MealSlot, Recipe
from glucose_planner.services.recommendations import (
    FALLBACK_RECIPES,
    RecommendationService,
)

_logger = logging.getLogger(__name__)

DEFAULT_SNACKS: tuple[dict[str, object], ...] = (
    {"id": "1", "icon": "🥛", "text": "Greek Yogurt", "carbs": "10g carbs"},
    {"id": "2", "icon": "💧", "text": "Drink water", "carbs": None},
)
DEFAULT_REMINDERS: tuple[dict[str, object], ...] = (
    {"id": "1", "icon": "💊", "text": "Check glucose after lunch", "time": "2:00 PM"},
    {
        "id": "2",
        "icon": "🍽️",
        "text": "Eat a light dinner",
        "time": "before 8:00 PM",
    },
)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans."""

    def get_meal_plan(self, user_id: UUID, plan_date: date) -> MealPlan | None:
        """Return the plan for a user and date, if present."""

    def put_meal_plan(self, plan: MealPlan) -> None:
        """Write the whole plan record, replacing any previous version."""


class RecipeRepository(Protocol):
    """Lookup interface for locally stored recipes."""

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe by id, if present."""


def plan_totals(plan: MealPlan) -> PlanTotals:
    """Sum nutrition over the filled slots; empty slots contribute zero."""
    recipes = [plan.recipe_for(slot) for slot in PLAN_SLOTS]
    filled = [recipe for recipe in recipes if recipe is not None]
    return PlanTotals(
        calories=sum(recipe.calories for recipe in filled),
        carbs=sum(recipe.carbs for recipe in filled),
        protein=sum(recipe.protein for recipe in filled),
    )


def _pick_for_slot(recipes: list[Recipe], slot: MealSlot) -> Recipe | None:
    for recipe in recipes:
        if recipe.category == slot:
            return recipe
    return recipes[0] if recipes else None


def parse_slot(slot: str) -> MealSlot:
    """Return the plan slot for a label or raise ValueError."""
    resolved = MealSlot(slot)
    if resolved not in PLAN_SLOTS:
        raise ValueError(f"{slot!r} is not a plan slot")
    return resolved


@dataclass
class MealPlanService:
    """Reads, updates and generates day plans."""

    repository: MealPlanRepository
    recipe_repository: RecipeRepository
    recommendation_service: RecommendationService | None = None

    def get_plan(self, user_id: UUID, plan_date: date) -> MealPlan | None:
        """Return the stored plan for a date."""
        return self.repository.get_meal_plan(user_id, plan_date)

    def assign_meal(
        self, user_id: UUID, plan_date: date, slot: str, recipe_id: int | None
    ) -> MealPlan:
        """Assign a recipe id to one slot, or clear it with None."""
        recipe = None if recipe_id is None else self._resolve_recipe(recipe_id)
        return self.assign_recipe(user_id, plan_date, slot, recipe)

    def assign_recipe(
        self, user_id: UUID, plan_date: date, slot: str, recipe: Recipe | None
    ) -> MealPlan:
        """Update one slot and persist the recomputed plan.

        Store failures propagate; the updated plan is only returned after a
        successful write. The whole record is rewritten, so concurrent edits
        to one date resolve to the last writer.
        """
        target = parse_slot(slot)
        current = self.repository.get_meal_plan(user_id, plan_date)
        if current is None:
            current = MealPlan(user_id=user_id, plan_date=plan_date)
        updated = replace(current, **{target.value: recipe})
        updated = replace(updated, totals=plan_totals(updated))
        self._persist(updated)
        return updated

    async def generate_day_plan(self, user_id: UUID, plan_date: date) -> MealPlan:
        """Build a full day from the first recommendation for each slot."""
        if self.recommendation_service is None:
            raise RuntimeError("Day plan generation needs a recommendation service")
        results = await asyncio.gather(
            *(
                self.recommendation_service.recommend_meals(user_id, slot)
                for slot in PLAN_SLOTS
            )
        )
        picks = {
            slot.value: _pick_for_slot(result.recipes, slot)
            for slot, result in zip(PLAN_SLOTS, results, strict=True)
        }
        plan = MealPlan(
            user_id=user_id,
            plan_date=plan_date,
            snacks=[dict(snack) for snack in DEFAULT_SNACKS],
            reminders=[dict(reminder) for reminder in DEFAULT_REMINDERS],
            **picks,
        )
        plan = replace(plan, totals=plan_totals(plan))
        self._persist(plan)
        return plan

    def _resolve_recipe(self, recipe_id: int) -> Recipe:
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is not None:
            return recipe
        for fallback in FALLBACK_RECIPES:
            if fallback.id == recipe_id:
                return fallback
        raise RecipeNotFoundError(f"Recipe {recipe_id} not found")

    def _persist(self, plan: MealPlan) -> None:
        try:
            self.repository.put_meal_plan(plan)
        except Exception:
            _logger.exception(
                "Failed to write meal plan for %s on %s", plan.user_id, plan.plan_date
            )
            raise
