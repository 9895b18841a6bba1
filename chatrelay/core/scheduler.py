"""
Recurring background task.

Runs an async callable at a fixed interval after an initial delay. The
sleep function is injectable so tests can drive time without waiting.

Dependencies: asyncio
System role: Scheduling for background maintenance jobs
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Fixed-interval task running on the event loop.

    A failing run is logged and the next run proceeds on schedule.

    Args:
        name: Task name used in logs
        func: Coroutine function executed on every tick
        interval: Time between runs
        initial_delay: Time before the first run
        sleep: Awaitable sleep, ``asyncio.sleep`` by default
    """

    def __init__(
        self,
        name: str,
        func: Callable[[], Awaitable[object]],
        interval: timedelta,
        initial_delay: timedelta = timedelta(0),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.name = name
        self._func = func
        self._interval = interval.total_seconds()
        self._initial_delay = initial_delay.total_seconds()
        self._sleep = sleep
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the loop; calling start on a running task does nothing."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.info(
            "Periodic task started",
            extra={"task": self.name, "interval_s": self._interval, "initial_delay_s": self._initial_delay},
        )

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Periodic task stopped", extra={"task": self.name})

    async def _loop(self) -> None:
        await self._sleep(self._initial_delay)
        while True:
            await self.run_once()
            await self._sleep(self._interval)

    async def run_once(self) -> None:
        try:
            await self._func()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Periodic task run failed", extra={"task": self.name})
