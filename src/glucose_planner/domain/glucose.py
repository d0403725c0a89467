"""Domain models for glucose readings and their derived views."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

MIN_GLUCOSE_MG_DL = 20
MAX_GLUCOSE_MG_DL = 600


class ReadingContext(StrEnum):
    """Situational tag recorded with a reading."""

    FASTING = "fasting"
    PRE_MEAL = "pre-meal"
    POST_MEAL = "post-meal"
    BEDTIME = "bedtime"
    RANDOM = "random"
    EXERCISE = "exercise"


class TargetContext(StrEnum):
    """Contexts that carry their own target range."""

    FASTING = "fasting"
    BEFORE_MEAL = "beforeMeal"
    AFTER_MEAL = "afterMeal"
    BEDTIME = "bedtime"


class GlucoseTier(StrEnum):
    """Classification bucket for a single reading."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    VERY_HIGH = "very_high"


class TrendDirection(StrEnum):
    """Direction of recent readings compared with older ones."""

    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"

    @property
    def outlook(self) -> str:
        """Return the patient-facing reading of the direction."""
        if self is TrendDirection.RISING:
            return "worsening"
        if self is TrendDirection.FALLING:
            return "improving"
        return "stable"


@dataclass(frozen=True)
class GlucoseReading:
    """Immutable glucose measurement in mg/dL."""

    value: int
    measured_at: datetime
    context: ReadingContext | None = None
    note: str | None = None
    id: UUID | None = None
    user_id: UUID | None = None


@dataclass(frozen=True)
class TargetRange:
    """Inclusive target range; ``low == 0`` means no lower bound."""

    low: int
    high: int

    def describe(self) -> str:
        """Render the range the way it is shown to users."""
        if self.low == 0:
            return f"Less than {self.high} mg/dL"
        return f"{self.low}-{self.high} mg/dL"


@dataclass(frozen=True)
class GlucoseTargets:
    """Target ranges for the four target contexts."""

    fasting: TargetRange
    before_meal: TargetRange
    after_meal: TargetRange
    bedtime: TargetRange

    def for_context(self, context: TargetContext) -> TargetRange:
        """Return the range for a target context."""
        return {
            TargetContext.FASTING: self.fasting,
            TargetContext.BEFORE_MEAL: self.before_meal,
            TargetContext.AFTER_MEAL: self.after_meal,
            TargetContext.BEDTIME: self.bedtime,
        }[context]


@dataclass(frozen=True)
class GlucoseStatus:
    """Derived classification of a reading; never persisted."""

    tier: GlucoseTier
    message: str
    advice: str


@dataclass(frozen=True)
class TrendSummary:
    """Aggregate view over a window of readings."""

    average: float
    time_in_range_percent: int
    trend: TrendDirection
    recent_spike_count: int
