"""Diabetes profile lookups."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from glucose_planner.domain.errors import ProfileNotFoundError
from glucose_planner.domain.profiles import DiabetesProfile


class ProfileRepository(Protocol):
    """Persistence interface for diabetes profiles."""

    def get_profile(self, user_id: UUID) -> DiabetesProfile | None:
        """Return the profile for a user, if present."""


@dataclass
class ProfileService:
    """Application service for profile reads."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> DiabetesProfile | None:
        """Return a user's profile or None before onboarding."""
        return self.repository.get_profile(user_id)

    def require_profile(self, user_id: UUID) -> DiabetesProfile:
        """Return a user's profile or raise when onboarding is missing."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(f"No diabetes profile for user {user_id}")
        return profile
