"""Optimistic water intake controller for client surfaces."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from typing import Protocol

from nutrivision.errors import PersistenceError
from nutrivision.services.scheduling import ScheduledTask, Scheduler
from nutrivision.services.streak import HydrationStreakTracker

SAVE_DEBOUNCE_SECONDS = 0.9
UNDO_WINDOW_SECONDS = 6.0
OVERFLOW_ALLOWANCE = 6

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaterReading:
    """Stored glasses for a day and the user's goal, when the server knows it."""

    glasses: int
    goal: int | None = None


class WaterIntakeGateway(Protocol):
    """Server endpoint holding the confirmed water intake."""

    async def fetch(self, day: date) -> WaterReading:
        """Return the stored glasses for a day and the current goal."""

    async def save(self, day: date, glasses: int) -> int:
        """Store the absolute glasses for a day and return the stored value."""


class Notifier(Protocol):
    """Surface for short user-visible messages."""

    def notify(
        self, title: str, description: str, *, destructive: bool = False
    ) -> None:
        """Show a message to the user."""


@dataclass
class LoggingNotifier(Notifier):
    """Notifier that writes messages to the application log."""

    logger: logging.Logger = field(default_factory=lambda: _logger)

    def notify(
        self, title: str, description: str, *, destructive: bool = False
    ) -> None:
        level = logging.WARNING if destructive else logging.INFO
        self.logger.log(level, "%s: %s", title, description)


class WaterStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    ROLLED_BACK = "rolled_back"


class WaterAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    RESET = "reset"


@dataclass(frozen=True)
class LastAction:
    """The most recent undoable action."""

    type: WaterAction
    previous_value: int
    timestamp: datetime


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


@dataclass
class WaterIntakeController:
    """Optimistic counter with debounced saves, rollback and a timed undo.

    The displayed value changes immediately; saves of the latest value are
    debounced, and a failed save restores the last server-confirmed value.
    """

    gateway: WaterIntakeGateway
    scheduler: Scheduler
    notifier: Notifier
    streak: HydrationStreakTracker
    goal: int = 8
    today: Callable[[], date] = _utc_today
    debounce_seconds: float = SAVE_DEBOUNCE_SECONDS
    undo_seconds: float = UNDO_WINDOW_SECONDS
    glasses: int = field(default=0, init=False)
    confirmed: int = field(default=0, init=False)
    status: WaterStatus = field(default=WaterStatus.IDLE, init=False)
    last_action: LastAction | None = field(default=None, init=False)
    _save_task: ScheduledTask | None = field(default=None, init=False, repr=False)
    _undo_task: ScheduledTask | None = field(default=None, init=False, repr=False)
    _pending_goal_day: date | None = field(default=None, init=False, repr=False)
    _in_flight: asyncio.Future[None] | None = field(
        default=None, init=False, repr=False
    )
    _resave: bool = field(default=False, init=False, repr=False)

    @property
    def cap(self) -> int:
        return self.goal + OVERFLOW_ALLOWANCE

    @property
    def save_pending(self) -> bool:
        return self._save_task is not None or self._in_flight is not None

    @property
    def can_undo(self) -> bool:
        return self._undo_task is not None and self.last_action is not None

    @property
    def goal_reached(self) -> bool:
        return self.glasses >= self.goal

    async def load(self) -> int:
        """Replace local state with the server value and goal for today."""
        self._cancel_save()
        self._close_undo_window(commit=False)
        reading = await self.gateway.fetch(self.today())
        if reading.goal:
            self.goal = reading.goal
        value = reading.glasses
        self.glasses = value
        self.confirmed = value
        self.status = WaterStatus.IDLE
        return value

    def add(self) -> bool:
        """Add one glass unless the daily cap is reached."""
        if self.glasses >= self.cap:
            self.notifier.notify(
                "Daily limit reached",
                f"You can log up to {self.cap} glasses per day.",
            )
            return False
        previous = self.glasses
        self._apply(WaterAction.ADD, previous + 1)
        if previous < self.goal <= self.glasses:
            self._pending_goal_day = self.today()
            self.notifier.notify(
                "Goal Reached!",
                f"You've reached your daily water goal of {self.goal} glasses!",
            )
        elif self.glasses < self.goal:
            self.notifier.notify(
                "Water Added", f"{self.glasses}/{self.goal} glasses today. Keep it up!"
            )
        else:
            self.notifier.notify(
                "Excellent Hydration!",
                f"You're exceeding your goal! {self.glasses}/{self.goal} glasses.",
            )
        return True

    def remove(self) -> bool:
        """Remove one glass unless the count is already zero."""
        if self.glasses <= 0:
            self.notifier.notify("Nothing to remove", "Water intake is already at 0.")
            return False
        self._apply(WaterAction.REMOVE, self.glasses - 1)
        return True

    def reset(self) -> bool:
        """Set today's count back to zero."""
        self._apply(WaterAction.RESET, 0)
        self.notifier.notify("Reset Complete", "Water intake has been reset to 0.")
        return True

    def undo(self) -> bool:
        """Revert the last action while its undo window is open."""
        if not self.can_undo or self.last_action is None:
            return False
        restored = self.last_action.previous_value
        self._close_undo_window(commit=False)
        self._cancel_save()
        self.glasses = restored
        self.status = WaterStatus.PENDING
        self._schedule_save()
        self.notifier.notify("Undone", f"Water intake restored to {restored}.")
        return True

    async def flush(self) -> None:
        """Persist a pending value now and wait for any save in flight."""
        if self._save_task is not None:
            self._cancel_save()
            await self._persist()
        if self._in_flight is not None:
            await asyncio.shield(self._in_flight)

    async def close(self) -> None:
        """Flush pending work and settle the open undo window."""
        await self.flush()
        self._close_undo_window(commit=self.status is not WaterStatus.ROLLED_BACK)

    def _apply(self, action: WaterAction, value: int) -> None:
        previous = self.glasses
        self._close_undo_window(commit=True)
        self.glasses = value
        self.status = WaterStatus.PENDING
        self.last_action = LastAction(
            type=action, previous_value=previous, timestamp=datetime.now(tz=UTC)
        )
        self._schedule_save()
        self._undo_task = self.scheduler.call_later(
            self.undo_seconds, self._expire_undo_window
        )

    def _schedule_save(self) -> None:
        self._cancel_save()
        self._save_task = self.scheduler.call_later(
            self.debounce_seconds, self._persist
        )

    def _cancel_save(self) -> None:
        if self._save_task is not None:
            self._save_task.cancel()
            self._save_task = None

    def _expire_undo_window(self) -> None:
        self._undo_task = None
        self._close_undo_window(commit=True)

    def _close_undo_window(self, *, commit: bool) -> None:
        if self._undo_task is not None:
            self._undo_task.cancel()
            self._undo_task = None
        self.last_action = None
        goal_day, self._pending_goal_day = self._pending_goal_day, None
        if commit and goal_day is not None:
            streak = self.streak.record_goal_reached(goal_day)
            _logger.info("Hydration streak is now %s day(s)", streak.count)

    async def _persist(self) -> None:
        self._save_task = None
        if self._in_flight is not None:
            # One write at a time; the running save picks up the latest value.
            self._resave = True
            return
        in_flight = asyncio.get_running_loop().create_future()
        self._in_flight = in_flight
        try:
            await self._save_latest()
        finally:
            self._in_flight = None
            in_flight.set_result(None)

    async def _save_latest(self) -> None:
        while True:
            self._resave = False
            value = self.glasses
            try:
                stored = await self.gateway.save(self.today(), value)
            except PersistenceError as exc:
                _logger.warning("Failed to save water intake: %s", exc.message)
                self._resave = False
                self._rollback()
                return
            self.confirmed = stored
            if not self._resave:
                break
        if self._save_task is None and self.glasses == value:
            self.status = WaterStatus.IDLE

    def _rollback(self) -> None:
        self._cancel_save()
        self._close_undo_window(commit=False)
        self.glasses = self.confirmed
        self.status = WaterStatus.ROLLED_BACK
        self.notifier.notify(
            "Couldn't save water intake",
            f"Restored the last saved value of {self.confirmed} glasses.",
            destructive=True,
        )
