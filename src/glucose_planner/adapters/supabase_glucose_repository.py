"""Supabase repository for glucose logs."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from supabase import Client

from glucose_planner.adapters.supabase_support import execute
from glucose_planner.domain.errors import StoreUnavailableError
from glucose_planner.domain.glucose import GlucoseReading, ReadingContext
from glucose_planner.services.glucose import GlucoseRepository

_COLUMNS = "id, user_id, glucose_value, measurement_time, context, notes"


@dataclass
class SupabaseGlucoseRepository(GlucoseRepository):
    """Supabase implementation for glucose readings."""

    client: Client

    def create_reading(self, user_id: UUID, reading: GlucoseReading) -> GlucoseReading:
        """Insert a reading row and return the stored reading."""
        response = execute(
            self.client.table("glucose_logs").insert(
                {
                    "user_id": str(user_id),
                    "glucose_value": reading.value,
                    "measurement_time": reading.measured_at.isoformat(),
                    "context": reading.context.value if reading.context else None,
                    "notes": reading.note,
                }
            ),
            "create_reading",
        )
        if not response.data:
            raise StoreUnavailableError("Failed to create glucose log")
        return _parse_reading(response.data[0])

    def list_readings(self, user_id: UUID, window_days: int) -> list[GlucoseReading]:
        """Return readings in the window, most recent first."""
        start = datetime.now(tz=UTC) - timedelta(days=window_days)
        response = execute(
            self.client.table("glucose_logs")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("measurement_time", start.isoformat())
            .order("measurement_time", desc=True),
            "list_readings",
        )
        return [_parse_reading(row) for row in response.data or []]


def _parse_reading(row: dict[str, object]) -> GlucoseReading:
    context = row.get("context")
    return GlucoseReading(
        id=UUID(str(row["id"])) if row.get("id") else None,
        user_id=UUID(str(row["user_id"])) if row.get("user_id") else None,
        value=int(row.get("glucose_value", 0)),
        measured_at=datetime.fromisoformat(str(row["measurement_time"])),
        context=_parse_context(context),
        note=row.get("notes"),
    )


def _parse_context(value: object) -> ReadingContext | None:
    if not isinstance(value, str):
        return None
    for context in ReadingContext:
        if value == context.value:
            return context
    return None
