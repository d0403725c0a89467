"""Diabetes profile domain model."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class DiabetesCategory(StrEnum):
    """Diabetes-type categories with their own targets."""

    TYPE1 = "type1"
    TYPE2 = "type2"
    GESTATIONAL = "gestational"
    PREDIABETES = "prediabetes"


@dataclass(frozen=True)
class DiabetesProfile:
    """Per-user diabetes settings captured at onboarding."""

    user_id: UUID
    diabetes_type: str | None
    insulin_dependent: bool = False
    medications: list[str] = field(default_factory=list)
    average_blood_sugar: float | None = None
