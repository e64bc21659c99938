"""Best-effort notifications between application surfaces."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoodLogUpdated:
    """Published after a user's food log changes."""

    user_id: UUID
    entry_count: int
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


LogUpdatedHandler = Callable[[FoodLogUpdated], Awaitable[None]]


@dataclass
class LogUpdateBroadcaster:
    """Fire-and-forget fan-out of log updates.

    Each handler is called at most once per event; a failing handler is
    logged and skipped.
    """

    _handlers: list[LogUpdatedHandler] = field(default_factory=list)

    def subscribe(self, handler: LogUpdatedHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: LogUpdatedHandler) -> bool:
        try:
            self._handlers.remove(handler)
        except ValueError:
            return False
        return True

    async def publish(self, event: FoodLogUpdated) -> None:
        """Deliver an event to the handlers subscribed right now."""
        for handler in list(self._handlers):
            try:
                await handler(event)
            except Exception:
                _logger.exception(
                    "Log update handler failed",
                    extra={"user_id": str(event.user_id)},
                )
