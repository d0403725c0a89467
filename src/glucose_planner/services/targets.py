"""Target range policy per diabetes category."""

from glucose_planner.domain.glucose import (
    GlucoseTargets,
    ReadingContext,
    TargetContext,
    TargetRange,
)
from glucose_planner.domain.profiles import DiabetesCategory

DEFAULT_CATEGORY = DiabetesCategory.TYPE2

TARGET_RANGES: dict[DiabetesCategory, GlucoseTargets] = {
    DiabetesCategory.TYPE1: GlucoseTargets(
        fasting=TargetRange(80, 130),
        before_meal=TargetRange(80, 130),
        after_meal=TargetRange(0, 180),
        bedtime=TargetRange(90, 150),
    ),
    DiabetesCategory.TYPE2: GlucoseTargets(
        fasting=TargetRange(80, 130),
        before_meal=TargetRange(80, 130),
        after_meal=TargetRange(0, 180),
        bedtime=TargetRange(90, 150),
    ),
    DiabetesCategory.GESTATIONAL: GlucoseTargets(
        fasting=TargetRange(0, 95),
        before_meal=TargetRange(0, 95),
        after_meal=TargetRange(0, 140),
        bedtime=TargetRange(0, 120),
    ),
    DiabetesCategory.PREDIABETES: GlucoseTargets(
        fasting=TargetRange(70, 100),
        before_meal=TargetRange(70, 100),
        after_meal=TargetRange(0, 140),
        bedtime=TargetRange(70, 100),
    ),
}

_READING_TO_TARGET: dict[str, TargetContext] = {
    ReadingContext.FASTING: TargetContext.FASTING,
    ReadingContext.PRE_MEAL: TargetContext.BEFORE_MEAL,
    ReadingContext.POST_MEAL: TargetContext.AFTER_MEAL,
    ReadingContext.BEDTIME: TargetContext.BEDTIME,
    ReadingContext.RANDOM: TargetContext.BEFORE_MEAL,
    ReadingContext.EXERCISE: TargetContext.BEFORE_MEAL,
}


def normalize_category(raw: str | None) -> DiabetesCategory | None:
    """Map free-text category labels such as "Type 1" to a category."""
    if not raw:
        return None
    compact = raw.strip().lower().replace(" ", "").replace("_", "").replace("-", "")
    for category in DiabetesCategory:
        if compact == category.value:
            return category
    return None


def targets_for(category: str | None) -> GlucoseTargets:
    """Return targets for a category; unknown categories use type2."""
    return TARGET_RANGES[normalize_category(category) or DEFAULT_CATEGORY]


def resolve_context(context: str | None) -> TargetContext:
    """Map a reading or target context label to a target context."""
    if isinstance(context, TargetContext):
        return context
    if context:
        for target in TargetContext:
            if context == target.value:
                return target
        mapped = _READING_TO_TARGET.get(context)
        if mapped is not None:
            return mapped
    return TargetContext.BEFORE_MEAL


def range_for(category: str | None, context: str | None) -> TargetRange:
    """Return the target range for a category and context."""
    return targets_for(category).for_context(resolve_context(context))


def describe_targets(category: str | None) -> dict[str, str]:
    """Return display strings for every target context."""
    targets = targets_for(category)
    return {
        context.value: targets.for_context(context).describe()
        for context in TargetContext
    }
