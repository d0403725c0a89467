"""Trend analysis over a window of glucose readings."""

from collections.abc import Sequence

from glucose_planner.domain.glucose import GlucoseReading, TrendDirection, TrendSummary
from glucose_planner.domain.profiles import DiabetesCategory
from glucose_planner.services.targets import normalize_category, targets_for

NEUTRAL_AVERAGE = 100.0
IN_RANGE_LOW = 70
IN_RANGE_HIGH = 140
SPIKE_THRESHOLD = 180
TREND_SAMPLE_SIZE = 3
TREND_DELTA = 15
MIN_READINGS_FOR_TREND = 2
ELEVATED_MARGIN = 20


def analyze(readings: Sequence[GlucoseReading | int]) -> TrendSummary:
    """Summarize readings ordered most-recent-first.

    Never raises: fewer than two readings report the neutral average and a
    stable trend.
    """
    values = [_value_of(reading) for reading in readings]
    in_range = sum(1 for value in values if IN_RANGE_LOW <= value <= IN_RANGE_HIGH)
    time_in_range = round(in_range * 100 / len(values)) if values else 0
    spikes = sum(1 for value in values if value > SPIKE_THRESHOLD)

    if len(values) < MIN_READINGS_FOR_TREND:
        return TrendSummary(
            average=NEUTRAL_AVERAGE,
            time_in_range_percent=time_in_range,
            trend=TrendDirection.STABLE,
            recent_spike_count=spikes,
        )

    sample = min(TREND_SAMPLE_SIZE, len(values))
    recent_mean = _mean(values[:sample])
    older_mean = _mean(values[-sample:])
    if recent_mean > older_mean + TREND_DELTA:
        trend = TrendDirection.RISING
    elif recent_mean < older_mean - TREND_DELTA:
        trend = TrendDirection.FALLING
    else:
        trend = TrendDirection.STABLE

    return TrendSummary(
        average=_mean(values),
        time_in_range_percent=time_in_range,
        trend=trend,
        recent_spike_count=spikes,
    )


def recent_average(
    readings: Sequence[GlucoseReading | int], baseline: float | None = None
) -> float:
    """Average used for carb budgeting, falling back to the profile baseline."""
    if not readings and baseline is not None:
        return float(baseline)
    return analyze(readings).average


def trend_insights(
    summary: TrendSummary, category: str | None, reading_count: int
) -> list[str]:
    """Return advisory notes for a trend summary."""
    if reading_count == 0:
        return ["Start logging your glucose levels to get personalized insights."]

    fasting = targets_for(category).fasting
    insights: list[str] = []
    if summary.average < fasting.low:
        insights.append(
            "Your 7-day average is below target. Consider reducing medication "
            "doses or adding snacks between meals."
        )
    elif summary.average > fasting.high + ELEVATED_MARGIN:
        insights.append(
            "Your 7-day average is significantly above target. Focus on "
            "consistent meal timing, portion control, and regular exercise."
        )
    elif summary.average > fasting.high:
        insights.append(
            "Your 7-day average is slightly above target. Try reducing portion "
            "sizes and increasing physical activity."
        )

    if summary.trend is TrendDirection.RISING:
        insights.append(
            "Your glucose trend is worsening. Review your recent meal choices "
            "and consider adjusting your medication timing."
        )
        insights.append(
            "Track your food intake more carefully to identify patterns that "
            "may be causing higher readings."
        )
    elif summary.trend is TrendDirection.FALLING:
        insights.append(
            "Excellent! Your glucose control is improving. Keep up your "
            "current routine."
        )
    else:
        insights.append(
            "Your glucose levels are stable. Continue monitoring and maintain "
            "your current management plan."
        )

    resolved = normalize_category(category)
    if resolved is DiabetesCategory.TYPE1:
        insights.append(
            "Consider reviewing your insulin-to-carb ratios and correction "
            "factors with your diabetes team."
        )
    elif resolved is DiabetesCategory.TYPE2:
        insights.append(
            "Focus on consistent meal timing and consider the glycemic index "
            "of your food choices."
        )
    elif resolved is DiabetesCategory.GESTATIONAL:
        insights.append(
            "Maintain regular meal timing and consider smaller, more frequent "
            "meals throughout the day."
        )
    return insights


def _value_of(reading: GlucoseReading | int) -> int:
    if isinstance(reading, GlucoseReading):
        return reading.value
    return int(reading)


def _mean(values: list[int]) -> float:
    return sum(values) / len(values)
