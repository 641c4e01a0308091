"""Delayed callbacks for debouncing and status timers.

Callbacks may be plain functions or coroutine functions. ``AsyncioScheduler``
runs them on the event loop; ``ManualScheduler`` runs them when a test
advances its simulated clock.
"""

from __future__ import annotations

import asyncio
import heapq
import inspect
import itertools
from collections.abc import Callable
from typing import Any, Protocol

Callback = Callable[[], Any]


class ScheduledHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay."""

    def schedule_after(self, delay: float, callback: Callback) -> ScheduledHandle: ...


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_later``; coroutines become tasks."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def schedule_after(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, self._run, callback)

    def _run(self, callback: Callback) -> None:
        result = callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            # Keep a reference until done, or the task may be collected
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for callbacks that are currently running."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Simulated clock. Nothing runs until ``advance`` is awaited."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualHandle, Callback]] = []
        self._counter = itertools.count()

    def schedule_after(self, delay: float, callback: Callback) -> _ManualHandle:
        handle = _ManualHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        """Number of callbacks scheduled and not cancelled."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    async def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that comes due."""
        deadline = self.now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now = due
            if handle.cancelled:
                continue
            result = callback()
            if inspect.isawaitable(result):
                await result
        self.now = deadline
