"""Glucose logging and per-user analysis."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from glucose_planner.domain.errors import InvalidReadingError
from glucose_planner.domain.glucose import (
    MAX_GLUCOSE_MG_DL,
    MIN_GLUCOSE_MG_DL,
    GlucoseReading,
    GlucoseStatus,
    ReadingContext,
    TrendSummary,
)
from glucose_planner.services.classifier import classify
from glucose_planner.services.profiles import ProfileService
from glucose_planner.services.trends import analyze, trend_insights


class GlucoseRepository(Protocol):
    """Persistence interface for glucose readings."""

    def create_reading(self, user_id: UUID, reading: GlucoseReading) -> GlucoseReading:
        """Store a reading and return it with its id."""

    def list_readings(self, user_id: UUID, window_days: int) -> list[GlucoseReading]:
        """Return readings in the window, most recent first."""


@dataclass(frozen=True)
class TrendReport:
    """Trend summary with advisory notes."""

    summary: TrendSummary
    insights: list[str]
    reading_count: int


@dataclass
class GlucoseService:
    """Service for logging readings and analysing them per user."""

    repository: GlucoseRepository
    profile_service: ProfileService
    window_days: int = 7

    def log_reading(
        self,
        user_id: UUID,
        value: int,
        context: ReadingContext | None = None,
        note: str | None = None,
    ) -> tuple[GlucoseReading, GlucoseStatus]:
        """Validate and store a new reading, returning it with its status."""
        if not MIN_GLUCOSE_MG_DL <= value <= MAX_GLUCOSE_MG_DL:
            raise InvalidReadingError(
                f"Glucose value {value} outside "
                f"{MIN_GLUCOSE_MG_DL}-{MAX_GLUCOSE_MG_DL} mg/dL"
            )
        reading = self.repository.create_reading(
            user_id,
            GlucoseReading(
                value=value,
                measured_at=datetime.now(tz=UTC),
                context=context,
                note=note,
                user_id=user_id,
            ),
        )
        return reading, self.classify_for_user(user_id, value, context)

    def recent_readings(
        self, user_id: UUID, days: int | None = None
    ) -> list[GlucoseReading]:
        """Return readings for the window, most recent first."""
        return self.repository.list_readings(user_id, days or self.window_days)

    def classify_for_user(
        self, user_id: UUID, value: int, context: str | None
    ) -> GlucoseStatus:
        """Classify a value using the user's diabetes category."""
        profile = self.profile_service.get_profile(user_id)
        return classify(value, profile.diabetes_type if profile else None, context)

    def trend_for_user(self, user_id: UUID, days: int | None = None) -> TrendReport:
        """Return the trend summary and insights for a user's window."""
        readings = self.recent_readings(user_id, days)
        profile = self.profile_service.get_profile(user_id)
        summary = analyze(readings)
        category = profile.diabetes_type if profile else None
        return TrendReport(
            summary=summary,
            insights=trend_insights(summary, category, len(readings)),
            reading_count=len(readings),
        )
