"""Supabase repository for health profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrivision.adapters.supabase_errors import execute
from nutrivision.domain.models import UserProfile
from nutrivision.services.profiles import ProfileRepository

DEFAULT_CONDITION_SEVERITY = "Moderate"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Profile row plus the condition, restriction and allergy tables."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        response = execute(
            self.client.table("user_profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1),
            "load profile",
        )
        if not response.data:
            return None
        row = response.data[0]
        updated_at_raw = row.get("updated_at")
        return UserProfile(
            user_id=user_id,
            age=_optional_int(row.get("age")),
            gender=row.get("gender"),
            activity_level=row.get("activity_level"),
            calorie_goal=_optional_int(row.get("calorie_goal")),
            water_goal_glasses=_optional_int(row.get("water_goal_glasses")),
            medical_conditions=self._column(
                "medical_conditions", "condition_name", user_id
            ),
            dietary_restrictions=self._column(
                "dietary_restrictions", "restriction", user_id
            ),
            allergies=self._column("food_allergies", "allergen", user_id),
            updated_at=(
                datetime.fromisoformat(updated_at_raw)
                if isinstance(updated_at_raw, str) and updated_at_raw
                else None
            ),
        )

    def upsert_profile(self, user_id: UUID, fields: dict[str, object]) -> None:
        payload = {
            "user_id": str(user_id),
            **fields,
            "updated_at": datetime.now(UTC).isoformat(),
        }
        execute(
            self.client.table("user_profiles").upsert(payload, on_conflict="user_id"),
            "save profile",
        )

    def replace_medical_conditions(self, user_id: UUID, conditions: list[str]) -> None:
        year = datetime.now(UTC).year
        self._replace(
            "medical_conditions",
            user_id,
            [
                {
                    "condition_name": condition,
                    "severity": DEFAULT_CONDITION_SEVERITY,
                    "diagnosed_year": year,
                }
                for condition in conditions
            ],
        )

    def replace_dietary_restrictions(
        self, user_id: UUID, restrictions: list[str]
    ) -> None:
        self._replace(
            "dietary_restrictions",
            user_id,
            [{"restriction": restriction} for restriction in restrictions],
        )

    def replace_allergies(self, user_id: UUID, allergens: list[str]) -> None:
        self._replace(
            "food_allergies",
            user_id,
            [{"allergen": allergen} for allergen in allergens],
        )

    def _column(self, table: str, column: str, user_id: UUID) -> list[str]:
        response = execute(
            self.client.table(table).select(column).eq("user_id", str(user_id)),
            f"load {table.replace('_', ' ')}",
        )
        return [str(row[column]) for row in response.data or [] if row.get(column)]

    def _replace(
        self, table: str, user_id: UUID, rows: list[dict[str, object]]
    ) -> None:
        label = table.replace("_", " ")
        execute(
            self.client.table(table).delete().eq("user_id", str(user_id)),
            f"clear {label}",
        )
        if not rows:
            return
        payload = [{"user_id": str(user_id), **row} for row in rows]
        execute(self.client.table(table).insert(payload), f"save {label}")


def _optional_int(value: object) -> int | None:
    if value is None or value == "":
        return None
    return int(value)
