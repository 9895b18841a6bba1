"""
Expiration sweeper.

Deletes messages past their expiry in bounded atomic batches and announces
the deleted ids to every connected session in a single event. Files the
messages referenced are kept; the batch delete records orphan markers.

Dependencies: chatrelay.core.scheduler
System role: Message TTL enforcement
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from chatrelay.core.exceptions import ChatRelayException
from chatrelay.core.scheduler import PeriodicTask

logger = logging.getLogger(__name__)

DeleteExpired = Callable[[datetime, int], Awaitable[list[str]]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpirationSweeper:
    """
    Periodic batch delete of expired messages.

    Args:
        delete_expired: Deletes up to ``limit`` messages with ``expires_at < now``
            atomically and returns their ids
        on_expired: Called once per non-empty batch with every deleted id
        clock: Source of the current UTC time
        interval: Time between runs
        initial_delay: Delay after start before the first run
        batch_size: Maximum messages deleted per run
    """

    def __init__(
        self,
        delete_expired: DeleteExpired,
        on_expired: Callable[[list[str]], None],
        clock: Callable[[], datetime] = utcnow,
        interval: timedelta = timedelta(minutes=10),
        initial_delay: timedelta = timedelta(minutes=1),
        batch_size: int = 100,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._delete_expired = delete_expired
        self._on_expired = on_expired
        self._clock = clock
        self._batch_size = batch_size
        self._task = PeriodicTask(
            "expiration-sweeper",
            self.run_once,
            interval=interval,
            initial_delay=initial_delay,
            sleep=sleep,
        )

    @property
    def running(self) -> bool:
        return self._task.running

    def start(self) -> None:
        self._task.start()

    async def stop(self) -> None:
        await self._task.stop()

    async def run_once(self) -> list[str]:
        """
        Execute one sweep.

        Returns:
            list[str]: Ids deleted by this run; empty when nothing expired or
            the batch failed
        """
        now = self._clock()
        try:
            deleted = await self._delete_expired(now, self._batch_size)
        except ChatRelayException as e:
            logger.error(
                "Expiration sweep failed",
                extra={"error_code": e.code, "error_msg": e.message, "details": e.details},
            )
            return []
        except Exception:
            logger.exception("Expiration sweep failed unexpectedly")
            return []

        if not deleted:
            return []

        logger.info(
            "Expired messages deleted",
            extra={"count": len(deleted), "cutoff": now.isoformat()},
        )
        self._on_expired(deleted)
        return deleted
