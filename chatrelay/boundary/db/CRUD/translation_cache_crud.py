"""
Translation cache CRUD operations.

Dependencies: sqlalchemy, chatrelay.boundary.db.models
System role: Durable translation cache persistence
"""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.boundary.db.models.translation_cache_model import TranslationCacheModel


class TranslationCacheCRUD:
    """
    CRUD operations for TranslationCacheModel.

    Keyed by ``cache_key`` rather than a UUID, so it does not extend BaseCRUD.
    """

    async def get_by_key(self, session: AsyncSession, cache_key: str) -> TranslationCacheModel | None:
        stmt = select(TranslationCacheModel).where(TranslationCacheModel.cache_key == cache_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, session: AsyncSession, **values) -> TranslationCacheModel:
        """Insert or replace an entry (last write wins)."""
        return await session.merge(TranslationCacheModel(**values))

    async def delete_all(self, session: AsyncSession) -> int:
        result = await session.execute(delete(TranslationCacheModel))
        return result.rowcount

    async def delete_expired(self, session: AsyncSession, now: datetime) -> int:
        stmt = delete(TranslationCacheModel).where(TranslationCacheModel.expires_at <= now)
        result = await session.execute(stmt)
        return result.rowcount


translation_cache_crud = TranslationCacheCRUD()
