"""Classification of single glucose readings."""

from glucose_planner.domain.glucose import (
    MAX_GLUCOSE_MG_DL,
    MIN_GLUCOSE_MG_DL,
    GlucoseStatus,
    GlucoseTier,
    ReadingContext,
    TargetContext,
)
from glucose_planner.domain.profiles import DiabetesCategory
from glucose_planner.services.targets import (
    DEFAULT_CATEGORY,
    normalize_category,
    range_for,
    resolve_context,
)

HYPO_THRESHOLD = 70
HIGH_MARGIN = 50
KETONE_THRESHOLD = 300

_NORMAL_ADVICE = {
    TargetContext.FASTING: (
        "Excellent fasting glucose! Continue your current morning routine "
        "and medication timing."
    ),
    TargetContext.BEFORE_MEAL: (
        "Perfect pre-meal reading! You can proceed with your planned meal."
    ),
    TargetContext.AFTER_MEAL: (
        "Great post-meal control! Your meal timing and portions are working well."
    ),
    TargetContext.BEDTIME: (
        "Good bedtime glucose! You're well-positioned for a stable night."
    ),
}

_GENERIC_NORMAL_ADVICE = "Keep up your excellent glucose management!"

# Random, exercise and unlabelled readings borrow the pre-meal range only.
_NAMED_CONTEXTS = frozenset(
    {
        *TargetContext,
        ReadingContext.FASTING,
        ReadingContext.PRE_MEAL,
        ReadingContext.POST_MEAL,
        ReadingContext.BEDTIME,
    }
)

_PROVIDER_FOLLOW_UP = (
    "If this persists, contact your healthcare provider within 24 hours."
)


def classify(value: int, category: str | None, context: str | None) -> GlucoseStatus:
    """Classify a reading against the category's target for the context.

    Values on a boundary belong to the safer tier: ``range.high`` is normal
    and ``range.high + 50`` is high. Values under 70 are low for every
    category. Out-of-domain values are clamped.
    """
    value = min(max(int(value), MIN_GLUCOSE_MG_DL), MAX_GLUCOSE_MG_DL)
    target_context = resolve_context(context)
    target = range_for(category, target_context)
    resolved = normalize_category(category) or DEFAULT_CATEGORY

    if value < max(target.low, HYPO_THRESHOLD):
        return GlucoseStatus(
            tier=GlucoseTier.LOW,
            message="Low Blood Sugar",
            advice=_low_advice(value),
        )
    if value <= target.high:
        return GlucoseStatus(
            tier=GlucoseTier.NORMAL,
            message="In Target Range",
            advice=_normal_advice(context, target_context),
        )
    if value <= target.high + HIGH_MARGIN:
        return GlucoseStatus(
            tier=GlucoseTier.HIGH,
            message="Above Target",
            advice=_high_advice(target_context, resolved),
        )
    return GlucoseStatus(
        tier=GlucoseTier.VERY_HIGH,
        message="Very High",
        advice=_very_high_advice(value, target_context, resolved),
    )


def _normal_advice(context: str | None, target_context: TargetContext) -> str:
    if context in _NAMED_CONTEXTS:
        return _NORMAL_ADVICE[target_context]
    return _GENERIC_NORMAL_ADVICE


def _low_advice(value: int) -> str:
    if value < HYPO_THRESHOLD:
        return (
            "Treat immediately with 15g fast-acting carbohydrate (4 glucose "
            "tablets, 4oz juice, or 1 tbsp honey). Recheck in 15 minutes. "
            "If still low, repeat."
        )
    return (
        "Have a light snack with about 15g carbs (1 small apple or 6 crackers). "
        "Monitor for 30 minutes."
    )


def _high_advice(context: TargetContext, category: DiabetesCategory) -> str:
    advice: list[str] = []
    if context is TargetContext.FASTING:
        advice.append("Consider checking your evening snack timing and portion size.")
        if category is DiabetesCategory.TYPE1:
            advice.append("Review your basal insulin dose with your doctor.")
    elif context is TargetContext.BEFORE_MEAL:
        advice.append(
            "Consider reducing your meal portion or choosing lower-carb options."
        )
        advice.append("Take a 10-15 minute walk before eating to help lower glucose.")
    elif context is TargetContext.AFTER_MEAL:
        advice.append("Take a 20-30 minute walk to help lower your glucose naturally.")
        advice.append("Consider reducing carbs in your next meal.")
    else:
        advice.append(
            "Avoid late-night snacks and consider light exercise before bed."
        )

    if category is DiabetesCategory.TYPE1:
        advice.append("Check if you need a correction dose of rapid-acting insulin.")
    elif category is DiabetesCategory.TYPE2:
        advice.append(
            "Consider your medication timing - take with meals if not already "
            "doing so."
        )
    return " ".join(advice)


def _very_high_advice(
    value: int, context: TargetContext, category: DiabetesCategory
) -> str:
    advice: list[str] = []
    if value > KETONE_THRESHOLD and category is DiabetesCategory.TYPE1:
        advice.append("Check for ketones immediately.")
    advice.append("Drink plenty of water to stay hydrated.")

    if context is TargetContext.FASTING:
        advice.append(
            "This high fasting glucose suggests reviewing your evening routine "
            "and medication."
        )
    elif context is TargetContext.AFTER_MEAL:
        advice.append(
            "Consider the meal composition - was it high in refined carbs or "
            "large portions?"
        )

    if category is DiabetesCategory.TYPE1:
        advice.append("Check your insulin pump or injection site for issues.")
        advice.append(
            "Consider a correction dose and monitor closely for the next 2 hours."
        )
    else:
        advice.append("Review your medication adherence and timing.")

    advice.append(_PROVIDER_FOLLOW_UP)
    return " ".join(advice)
