"""Request models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from glucose_planner.domain.glucose import (
    MAX_GLUCOSE_MG_DL,
    MIN_GLUCOSE_MG_DL,
    ReadingContext,
)


class ClassifyRequest(BaseModel):
    """Ad-hoc classification of a single value."""

    value: int
    category: str | None = None
    context: str | None = None


class ReadingPayload(BaseModel):
    """Reading supplied inline for trend analysis."""

    value: int = Field(ge=MIN_GLUCOSE_MG_DL, le=MAX_GLUCOSE_MG_DL)
    measured_at: datetime | None = None
    context: ReadingContext | None = None


class TrendRequest(BaseModel):
    """Readings ordered most recent first."""

    readings: list[ReadingPayload] = Field(default_factory=list)


class LogReadingRequest(BaseModel):
    """New glucose log entry."""

    value: int = Field(ge=MIN_GLUCOSE_MG_DL, le=MAX_GLUCOSE_MG_DL)
    context: ReadingContext | None = None
    note: str | None = Field(default=None, max_length=500)


class AssignMealRequest(BaseModel):
    """Recipe to place in a plan slot; null clears the slot."""

    recipe_id: int | None = None
