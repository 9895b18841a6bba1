"""
Durable translation cache.

Implements the gateway's cache contract on the ``translation_cache`` table.
Expired entries read as misses and are overwritten by the next write.

Dependencies: sqlalchemy, chatrelay.boundary.db
System role: Translation cache persistence adapter
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from chatrelay.boundary.db.base import utcnow
from chatrelay.boundary.db.CRUD.translation_cache_crud import translation_cache_crud
from chatrelay.core.exceptions import PersistenceError
from chatrelay.core.translation.cache import CacheKey, CachedTranslation

logger = logging.getLogger(__name__)


class DatabaseTranslationCache:
    """
    Translation cache backed by the relational store.

    Args:
        session_factory: Async session factory
        ttl: Lifetime of a written entry
        clock: Source of the current UTC time
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._ttl = ttl
        self._clock = clock

    async def get(self, key: CacheKey) -> CachedTranslation | None:
        try:
            async with self._session_factory() as db:
                row = await translation_cache_crud.get_by_key(db, key.digest)
        except SQLAlchemyError as e:
            raise PersistenceError("Translation cache read failed", operation="cache_get") from e

        if row is None or row.expires_at <= self._clock():
            return None
        return CachedTranslation(translation=row.translation, provider=row.provider, tone=row.tone)

    async def set(self, key: CacheKey, value: CachedTranslation) -> None:
        now = self._clock()
        try:
            async with self._session_factory() as db:
                await translation_cache_crud.upsert(
                    db,
                    cache_key=key.digest,
                    source_text_prefix=key.source_text_prefix,
                    target_lang=key.target_lang,
                    tone_mode=key.tone_mode,
                    translation=value.translation,
                    provider=value.provider,
                    tone=value.tone,
                    created_at=now,
                    expires_at=now + self._ttl,
                )
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError("Translation cache write failed", operation="cache_set") from e

    async def clear(self) -> None:
        try:
            async with self._session_factory() as db:
                removed = await translation_cache_crud.delete_all(db)
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError("Translation cache clear failed", operation="cache_clear") from e
        logger.info("Translation cache cleared", extra={"removed": removed})

    async def purge_expired(self) -> int:
        """Delete expired entries; returns the number removed."""
        try:
            async with self._session_factory() as db:
                removed = await translation_cache_crud.delete_expired(db, self._clock())
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError("Translation cache purge failed", operation="cache_purge") from e
        return removed
