"""
Test suite for the expiration sweeper and periodic task.

Time is simulated through injected clocks and sleep functions.

System role: Verification of TTL enforcement scheduling
"""

import asyncio
from datetime import timedelta

import pytest

from chatrelay.core.exceptions import PersistenceError
from chatrelay.core.scheduler import PeriodicTask
from chatrelay.core.sweeper import ExpirationSweeper
from conftest import FixedClock


class RecordingDelete:
    def __init__(self, batches: list) -> None:
        self._batches = list(batches)
        self.calls: list = []

    async def __call__(self, now, limit):
        self.calls.append((now, limit))
        batch = self._batches.pop(0) if self._batches else []
        if isinstance(batch, Exception):
            raise batch
        return batch


async def noop() -> None:
    return None


class ManualSleep:
    """Sleep that records requested delays and yields control once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


class TestRunOnce:
    """Test suite for ExpirationSweeper.run_once()."""

    @pytest.mark.asyncio
    async def test_run_once_should_announce_all_ids_in_one_event(self) -> None:
        # Arrange
        clock = FixedClock()
        delete = RecordingDelete([["m1", "m2", "m3"]])
        announced: list[list[str]] = []
        sweeper = ExpirationSweeper(delete, announced.append, clock=clock, batch_size=100)

        # Act
        deleted = await sweeper.run_once()

        # Assert
        assert deleted == ["m1", "m2", "m3"]
        assert announced == [["m1", "m2", "m3"]]
        assert delete.calls == [(clock.now, 100)]

    @pytest.mark.asyncio
    async def test_run_once_should_stay_silent_for_empty_batch(self) -> None:
        announced: list[list[str]] = []
        sweeper = ExpirationSweeper(RecordingDelete([[]]), announced.append)

        assert await sweeper.run_once() == []
        assert announced == []

    @pytest.mark.asyncio
    async def test_run_once_should_log_failure_and_not_announce(self) -> None:
        announced: list[list[str]] = []
        sweeper = ExpirationSweeper(
            RecordingDelete([PersistenceError("db down", operation="delete_expired")]),
            announced.append,
        )

        assert await sweeper.run_once() == []
        assert announced == []

    @pytest.mark.asyncio
    async def test_run_once_should_recover_on_next_run_after_failure(self) -> None:
        announced: list[list[str]] = []
        sweeper = ExpirationSweeper(
            RecordingDelete([RuntimeError("boom"), ["m1"]]),
            announced.append,
        )

        await sweeper.run_once()
        await sweeper.run_once()

        assert announced == [["m1"]]

    @pytest.mark.asyncio
    async def test_run_once_should_use_current_clock_reading(self) -> None:
        clock = FixedClock()
        delete = RecordingDelete([[], []])
        sweeper = ExpirationSweeper(delete, lambda ids: None, clock=clock)

        await sweeper.run_once()
        later = clock.advance(timedelta(minutes=10))
        await sweeper.run_once()

        assert delete.calls[1][0] == later


class TestScheduling:
    """Test suite for start()/stop() and PeriodicTask."""

    @pytest.mark.asyncio
    async def test_start_should_wait_initial_delay_then_interval(self) -> None:
        # Arrange
        sleep = ManualSleep()
        delete = RecordingDelete([])
        sweeper = ExpirationSweeper(
            delete,
            lambda ids: None,
            interval=timedelta(minutes=10),
            initial_delay=timedelta(minutes=1),
            sleep=sleep,
        )

        # Act
        sweeper.start()
        for _ in range(10):
            await asyncio.sleep(0)
        await sweeper.stop()

        # Assert
        assert sleep.delays[0] == 60
        assert all(delay == 600 for delay in sleep.delays[1:])
        assert len(delete.calls) >= 2
        assert sweeper.running is False

    @pytest.mark.asyncio
    async def test_periodic_task_should_keep_running_after_failed_run(self) -> None:
        runs = 0

        async def flaky() -> None:
            nonlocal runs
            runs += 1
            if runs == 1:
                raise RuntimeError("first run fails")

        task = PeriodicTask("flaky", flaky, interval=timedelta(seconds=1), sleep=ManualSleep())

        task.start()
        for _ in range(10):
            await asyncio.sleep(0)
        await task.stop()

        assert runs >= 2

    @pytest.mark.asyncio
    async def test_start_should_be_idempotent(self) -> None:
        task = PeriodicTask("noop", noop, interval=timedelta(hours=1))
        task.start()
        first = task._task

        task.start()

        assert task._task is first
        await task.stop()

    @pytest.mark.asyncio
    async def test_stop_should_be_safe_before_start(self) -> None:
        task = PeriodicTask("noop", noop, interval=timedelta(hours=1))

        await task.stop()

        assert task.running is False
