"""Supabase repository for diabetes profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from glucose_planner.adapters.supabase_support import execute
from glucose_planner.domain.profiles import DiabetesProfile
from glucose_planner.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile reads."""

    client: Client

    def get_profile(self, user_id: UUID) -> DiabetesProfile | None:
        """Return the profile row for a user."""
        response = execute(
            self.client.table("profiles")
            .select(
                "id, diabetes_type, insulin_dependent, medications, "
                "average_blood_sugar"
            )
            .eq("id", str(user_id))
            .limit(1),
            "get_profile",
        )
        if not response.data:
            return None
        row = response.data[0]
        average = row.get("average_blood_sugar")
        return DiabetesProfile(
            user_id=UUID(row["id"]),
            diabetes_type=row.get("diabetes_type"),
            insulin_dependent=bool(row.get("insulin_dependent")),
            medications=list(row.get("medications") or []),
            average_blood_sugar=float(average) if average is not None else None,
        )
