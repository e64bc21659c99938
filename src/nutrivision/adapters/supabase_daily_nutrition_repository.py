"""Supabase repository for daily nutrition summaries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from nutrivision.adapters.supabase_errors import execute
from nutrivision.domain.daily import DailyNutritionSummary
from nutrivision.domain.nutrition import Macros
from nutrivision.errors import PersistenceError
from nutrivision.services.daily import DailyNutritionRepository


@dataclass
class SupabaseDailyNutritionRepository(DailyNutritionRepository):
    """Supabase implementation for the `daily_nutrition` table."""

    client: Client

    def get_summary(
        self, user_id: UUID, log_date: date
    ) -> DailyNutritionSummary | None:
        """Return the row for a user and day."""
        response = execute(
            self.client.table("daily_nutrition")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("log_date", log_date.isoformat())
            .limit(1),
            "load daily nutrition",
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_summary(self, summary: DailyNutritionSummary) -> DailyNutritionSummary:
        """Insert a new row."""
        payload = {
            "user_id": str(summary.user_id),
            "log_date": summary.log_date.isoformat(),
            **_totals_payload(summary.totals),
            "water_intake_glasses": summary.water_intake_glasses,
        }
        if summary.updated_at is not None:
            payload["updated_at"] = summary.updated_at.isoformat()
        response = execute(
            self.client.table("daily_nutrition").insert(payload),
            "create daily nutrition",
        )
        return _first_row(response.data, "create daily nutrition")

    def update_totals(
        self,
        user_id: UUID,
        log_date: date,
        totals: Macros,
        updated_at: datetime,
    ) -> DailyNutritionSummary:
        """Overwrite the nutrition totals for a day."""
        payload = {**_totals_payload(totals), "updated_at": updated_at.isoformat()}
        return self._update(user_id, log_date, payload, "update daily nutrition")

    def update_water(
        self,
        user_id: UUID,
        log_date: date,
        glasses: int,
        updated_at: datetime,
    ) -> DailyNutritionSummary:
        """Overwrite the water intake for a day."""
        payload = {
            "water_intake_glasses": glasses,
            "updated_at": updated_at.isoformat(),
        }
        return self._update(user_id, log_date, payload, "save water intake")

    def _update(
        self,
        user_id: UUID,
        log_date: date,
        payload: dict[str, object],
        action: str,
    ) -> DailyNutritionSummary:
        response = execute(
            self.client.table("daily_nutrition")
            .update(payload)
            .eq("user_id", str(user_id))
            .eq("log_date", log_date.isoformat()),
            action,
        )
        return _first_row(response.data, action)


def _totals_payload(totals: Macros) -> dict[str, object]:
    return {
        "total_calories": totals.calories,
        "total_protein": totals.protein,
        "total_carbs": totals.carbs,
        "total_fat": totals.fats,
        "total_fiber": totals.fiber,
        "total_sugar": totals.sugar,
    }


def _first_row(
    data: list[dict[str, object]] | None, action: str
) -> DailyNutritionSummary:
    if not data:
        raise PersistenceError(f"Failed to {action}")
    return _parse_row(data[0])


def _parse_row(row: dict[str, object]) -> DailyNutritionSummary:
    updated_at_raw = row.get("updated_at")
    return DailyNutritionSummary(
        user_id=UUID(str(row["user_id"])),
        log_date=date.fromisoformat(str(row["log_date"])),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        total_fiber=float(row.get("total_fiber") or 0.0),
        total_sugar=float(row.get("total_sugar") or 0.0),
        water_intake_glasses=int(row.get("water_intake_glasses") or 0),
        updated_at=(
            datetime.fromisoformat(updated_at_raw)
            if isinstance(updated_at_raw, str) and updated_at_raw
            else None
        ),
    )
