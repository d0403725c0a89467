"""Per-meal carbohydrate budget."""

from glucose_planner.domain.profiles import DiabetesCategory
from glucose_planner.services.targets import normalize_category

DEFAULT_BASE_CARBS = 45
ABSOLUTE_FLOOR_CARBS = 20

_BASE_CARBS = {
    # (category, insulin_dependent) -> grams
    (DiabetesCategory.TYPE1, True): 50,
    (DiabetesCategory.TYPE1, False): 40,
    (DiabetesCategory.TYPE2, True): 45,
    (DiabetesCategory.TYPE2, False): 35,
}

LOW_CARB_BADGE_MAX = 20
MEDIUM_CARB_BADGE_MAX = 35


def max_carbs(
    category: str | None, insulin_dependent: bool, recent_average: float
) -> int:
    """Return the per-meal carbohydrate ceiling in grams."""
    resolved = normalize_category(category)
    ceiling = _BASE_CARBS.get((resolved, bool(insulin_dependent)), DEFAULT_BASE_CARBS)

    if recent_average > 180:
        ceiling = max(20, ceiling - 15)
    elif recent_average > 140:
        ceiling = max(25, ceiling - 10)
    elif recent_average < 80:
        ceiling += 10

    return max(ABSOLUTE_FLOOR_CARBS, ceiling)


def carb_badge(carbs: float) -> str:
    """Label a recipe by its carbohydrate content."""
    if carbs <= LOW_CARB_BADGE_MAX:
        return "Low-Carb"
    if carbs <= MEDIUM_CARB_BADGE_MAX:
        return "Medium"
    return "High-Carb"
