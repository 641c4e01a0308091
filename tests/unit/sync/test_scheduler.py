"""Tests for debounce schedulers."""

from __future__ import annotations

import asyncio

from resume_matcher.sync.scheduler import AsyncioScheduler, ManualScheduler


class TestManualScheduler:
    async def test_runs_callbacks_when_due(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.schedule_after(1.0, lambda: calls.append("a"))
        scheduler.schedule_after(2.0, lambda: calls.append("b"))

        await scheduler.advance(0.5)
        assert calls == []

        await scheduler.advance(0.5)
        assert calls == ["a"]

        await scheduler.advance(5)
        assert calls == ["a", "b"]
        assert scheduler.now == 6.0

    async def test_cancelled_callbacks_do_not_run(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.schedule_after(1.0, lambda: calls.append("a"))

        handle.cancel()
        await scheduler.advance(2)

        assert calls == []
        assert scheduler.pending == 0

    async def test_awaits_coroutine_callbacks(self):
        scheduler = ManualScheduler()
        calls = []

        async def callback():
            calls.append("async")

        scheduler.schedule_after(1.0, callback)
        await scheduler.advance(1.0)

        assert calls == ["async"]

    async def test_callbacks_scheduled_while_advancing_run_if_due(self):
        scheduler = ManualScheduler()
        calls = []

        def first():
            calls.append("first")
            scheduler.schedule_after(1.0, lambda: calls.append("second"))

        scheduler.schedule_after(1.0, first)
        await scheduler.advance(3)

        assert calls == ["first", "second"]

    async def test_same_due_time_runs_in_schedule_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.schedule_after(1.0, lambda: calls.append(1))
        scheduler.schedule_after(1.0, lambda: calls.append(2))

        await scheduler.advance(1.0)

        assert calls == [1, 2]


class TestAsyncioScheduler:
    async def test_runs_plain_callback(self):
        scheduler = AsyncioScheduler()
        done = asyncio.Event()

        scheduler.schedule_after(0.01, done.set)

        await asyncio.wait_for(done.wait(), timeout=1)

    async def test_runs_coroutine_callback(self):
        scheduler = AsyncioScheduler()
        calls = []

        async def callback():
            calls.append("ran")

        scheduler.schedule_after(0.01, callback)
        await asyncio.sleep(0.05)
        await scheduler.drain()

        assert calls == ["ran"]

    async def test_cancel(self):
        scheduler = AsyncioScheduler()
        calls = []

        handle = scheduler.schedule_after(0.01, lambda: calls.append("ran"))
        handle.cancel()
        await asyncio.sleep(0.05)

        assert calls == []
