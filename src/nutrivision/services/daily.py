"""Daily nutrition aggregation."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from nutrivision.domain.daily import DailyNutritionSummary
from nutrivision.domain.nutrition import Macros
from nutrivision.errors import ValidationError

_logger = logging.getLogger(__name__)


class DailyNutritionRepository(Protocol):
    """Persistence interface for daily nutrition summaries."""

    def get_summary(
        self, user_id: UUID, log_date: date
    ) -> DailyNutritionSummary | None:
        """Return the summary row for a user and day, if present."""

    def create_summary(self, summary: DailyNutritionSummary) -> DailyNutritionSummary:
        """Insert a new summary row and return it."""

    def update_totals(
        self,
        user_id: UUID,
        log_date: date,
        totals: Macros,
        updated_at: datetime,
    ) -> DailyNutritionSummary:
        """Overwrite the nutrition totals of an existing row."""

    def update_water(
        self,
        user_id: UUID,
        log_date: date,
        glasses: int,
        updated_at: datetime,
    ) -> DailyNutritionSummary:
        """Overwrite the water intake of an existing row."""


@dataclass
class DailyAggregator:
    """Maintains one running totals row per user per calendar day.

    Merges are additive read-then-write sequences without locking, so
    re-applying a delta double counts and concurrent merges for the same
    day may lose an update.
    """

    repository: DailyNutritionRepository

    def merge(
        self, user_id: UUID, log_date: date, delta: Macros
    ) -> DailyNutritionSummary:
        """Add a nutrition delta to the day's running totals."""
        existing = self.repository.get_summary(user_id, log_date)
        now = datetime.now(tz=UTC)
        if existing is None:
            _logger.info(
                "Creating daily summary",
                extra={"user_id": str(user_id), "log_date": log_date.isoformat()},
            )
            return self.repository.create_summary(
                _summary_from_totals(user_id, log_date, delta, water=0, now=now)
            )
        return self.repository.update_totals(
            user_id, log_date, existing.totals.plus(delta), now
        )

    def set_water_glasses(
        self, user_id: UUID, log_date: date, glasses: int
    ) -> DailyNutritionSummary:
        """Set the absolute water intake for the day."""
        if glasses < 0:
            raise ValidationError("Glasses must be zero or more")
        existing = self.repository.get_summary(user_id, log_date)
        now = datetime.now(tz=UTC)
        if existing is None:
            return self.repository.create_summary(
                _summary_from_totals(
                    user_id, log_date, Macros(), water=glasses, now=now
                )
            )
        return self.repository.update_water(user_id, log_date, glasses, now)

    def get_summary(self, user_id: UUID, log_date: date) -> DailyNutritionSummary:
        """Return the stored summary, or an all-zero one without creating it."""
        existing = self.repository.get_summary(user_id, log_date)
        if existing is not None:
            return existing
        return _summary_from_totals(user_id, log_date, Macros(), water=0, now=None)


def _summary_from_totals(
    user_id: UUID,
    log_date: date,
    totals: Macros,
    *,
    water: int,
    now: datetime | None,
) -> DailyNutritionSummary:
    return DailyNutritionSummary(
        user_id=user_id,
        log_date=log_date,
        total_calories=totals.calories,
        total_protein=totals.protein,
        total_carbs=totals.carbs,
        total_fat=totals.fats,
        total_fiber=totals.fiber,
        total_sugar=totals.sugar,
        water_intake_glasses=water,
        updated_at=now,
    )
