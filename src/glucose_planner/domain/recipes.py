"""Recipe domain model."""

from dataclasses import dataclass, field
from enum import StrEnum


class MealSlot(StrEnum):
    """Recipe categories; the first three are plan slots."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


PLAN_SLOTS = (MealSlot.BREAKFAST, MealSlot.LUNCH, MealSlot.DINNER)


@dataclass(frozen=True)
class Recipe:
    """Read-only recipe as supplied by a catalog or the local store."""

    id: int
    name: str
    category: str
    calories: float = 0.0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    difficulty: str = "easy"
    ready_in_minutes: int | None = None
    image_url: str | None = None
    source_url: str | None = None
    tags: tuple[str, ...] = ()
    ingredients: tuple[object, ...] = field(default_factory=tuple)
    instructions: tuple[object, ...] = field(default_factory=tuple)
