"""Cancellable delayed callbacks."""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

ScheduledCallback = Callable[[], Awaitable[None] | None]


class ScheduledTask(Protocol):
    """Handle for a delayed callback."""

    def cancel(self) -> None:
        """Prevent the callback from running if it has not fired yet."""


class Scheduler(Protocol):
    """Schedules callbacks after a delay in seconds."""

    def call_later(self, delay: float, callback: ScheduledCallback) -> ScheduledTask:
        """Run `callback` after `delay` seconds unless cancelled."""


@dataclass
class _TimerTask(ScheduledTask):
    handle: asyncio.TimerHandle

    def cancel(self) -> None:
        self.handle.cancel()


@dataclass
class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running asyncio event loop.

    Cancelling a task only stops a timer that has not fired; a coroutine
    already started by a fired timer keeps running.
    """

    _running: set[asyncio.Task[None]] = field(default_factory=set)

    def call_later(self, delay: float, callback: ScheduledCallback) -> ScheduledTask:
        loop = asyncio.get_running_loop()
        return _TimerTask(handle=loop.call_later(delay, self._fire, callback))

    async def drain(self) -> None:
        """Wait for coroutines started by fired timers."""
        while self._running:
            await asyncio.gather(*list(self._running))

    def _fire(self, callback: ScheduledCallback) -> None:
        result = callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._running.add(task)
            task.add_done_callback(self._running.discard)
