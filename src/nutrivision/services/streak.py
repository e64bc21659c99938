"""Hydration streak kept in device-local storage."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol


class LocalStore(Protocol):
    """Key-value storage local to the device."""

    def get(self, key: str) -> dict[str, object] | None:
        """Return the stored value for a key, if any."""

    def set(self, key: str, value: dict[str, object]) -> None:
        """Persist a value under a key."""


@dataclass(frozen=True)
class HydrationStreak:
    """Consecutive days on which the water goal was reached."""

    count: int
    last_goal_date: date | None


@dataclass
class HydrationStreakTracker:
    """Updates the streak when the daily water goal is reached."""

    store: LocalStore
    key: str = "hydration_streak"

    def current(self) -> HydrationStreak:
        raw = self.store.get(self.key) or {}
        count = raw.get("count")
        last = raw.get("last_goal_date")
        return HydrationStreak(
            count=count if isinstance(count, int) else 0,
            last_goal_date=_parse_date(last),
        )

    def record_goal_reached(self, day: date) -> HydrationStreak:
        """Extend, keep, or restart the streak for `day`."""
        streak = self.current()
        if streak.last_goal_date == day:
            return streak
        if streak.last_goal_date == day - timedelta(days=1):
            updated = HydrationStreak(count=streak.count + 1, last_goal_date=day)
        else:
            updated = HydrationStreak(count=1, last_goal_date=day)
        self.store.set(
            self.key,
            {"count": updated.count, "last_goal_date": day.isoformat()},
        )
        return updated


def _parse_date(value: object) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
