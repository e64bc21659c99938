"""Domain models for daily nutrition summaries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from nutrivision.domain.nutrition import Macros


@dataclass(frozen=True)
class DailyNutritionSummary:
    """Running nutrition totals for one user on one calendar day."""

    user_id: UUID
    log_date: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_fiber: float
    total_sugar: float
    water_intake_glasses: int
    updated_at: datetime | None

    @property
    def totals(self) -> Macros:
        return Macros(
            calories=self.total_calories,
            protein=self.total_protein,
            carbs=self.total_carbs,
            fats=self.total_fat,
            fiber=self.total_fiber,
            sugar=self.total_sugar,
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "user_id": str(self.user_id),
            "log_date": self.log_date.isoformat(),
            "total_calories": self.total_calories,
            "total_protein": self.total_protein,
            "total_carbs": self.total_carbs,
            "total_fat": self.total_fat,
            "total_fiber": self.total_fiber,
            "total_sugar": self.total_sugar,
            "water_intake_glasses": self.water_intake_glasses,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
