"""Supabase repository for food logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrivision.adapters.supabase_errors import execute
from nutrivision.domain.food_logs import FoodLogEntry, LogType, NewFoodLogEntry
from nutrivision.errors import PersistenceError
from nutrivision.services.ingestion import FoodLogRepository


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food log rows."""

    client: Client

    def insert_entries(self, entries: list[NewFoodLogEntry]) -> list[FoodLogEntry]:
        """Insert all rows in a single request."""
        payload = [_serialize_entry(entry) for entry in entries]
        response = execute(
            self.client.table("food_logs").insert(payload), "save food logs"
        )
        if not response.data:
            raise PersistenceError("Failed to save food logs")
        return [_parse_row(row) for row in response.data]

    def list_entries(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[FoodLogEntry]:
        """Return a user's rows, most recent first."""
        query = (
            self.client.table("food_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True)
        )
        if start is not None:
            query = query.gte("logged_at", start.isoformat())
        if end is not None:
            query = query.lt("logged_at", end.isoformat())
        response = execute(query, "load food logs")
        return [_parse_row(row) for row in response.data or []]


def _serialize_entry(entry: NewFoodLogEntry) -> dict[str, object]:
    return {
        "user_id": str(entry.user_id),
        "description": entry.description,
        "logged_at": entry.logged_at.isoformat(),
        "log_type": entry.log_type.value,
        "calories": entry.calories,
        "protein": entry.protein_g,
        "carbs": entry.carbs_g,
        "fat": entry.fat_g,
        "fiber": entry.fiber_g,
        "sugar": entry.sugar_g,
        "confidence": entry.confidence,
        "source": entry.source,
        "usda_food_id": entry.usda_food_id,
        "logmeal_food_id": entry.logmeal_food_id,
        "raw_response": entry.raw_response,
    }


def _parse_row(row: dict[str, object]) -> FoodLogEntry:
    confidence = row.get("confidence")
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        description=str(row.get("description") or ""),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        log_type=LogType(row.get("log_type") or LogType.TEXT.value),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein") or 0.0),
        carbs_g=float(row.get("carbs") or 0.0),
        fat_g=float(row.get("fat") or 0.0),
        fiber_g=float(row.get("fiber") or 0.0),
        sugar_g=float(row.get("sugar") or 0.0),
        confidence=float(confidence) if confidence is not None else None,
        source=str(row.get("source") or ""),
        usda_food_id=_optional_str(row.get("usda_food_id")),
        logmeal_food_id=_optional_str(row.get("logmeal_food_id")),
        raw_response=row.get("raw_response") or {},
    )


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)
