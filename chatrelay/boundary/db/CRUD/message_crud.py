"""
Message CRUD operations.

Extends BaseCRUD with the history window, pagination, expiration batch and
file-share queries.

Dependencies: sqlalchemy, chatrelay.boundary.db.models
System role: Message persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.boundary.db.CRUD.base_crud import BaseCRUD
from chatrelay.boundary.db.models.message_model import MessageModel


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def get_recent(self, session: AsyncSession, limit: int) -> Sequence[MessageModel]:
        """
        Retrieve the most recent messages, newest first.

        Args:
            session: Async database session
            limit: Window size

        Returns:
            Up to ``limit`` messages ordered by creation time descending
        """
        stmt = (
            select(MessageModel)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_page(
        self,
        session: AsyncSession,
        limit: int,
        offset: int = 0,
    ) -> Sequence[MessageModel]:
        """Retrieve a page of messages, newest first."""
        stmt = (
            select(MessageModel)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count(self, session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(MessageModel))
        return result.scalar_one()

    async def get_expired(
        self,
        session: AsyncSession,
        now: datetime,
        limit: int,
    ) -> Sequence[MessageModel]:
        """
        Retrieve messages whose expiry lies strictly before ``now``.

        Args:
            session: Async database session
            now: Reference time
            limit: Batch size

        Returns:
            Up to ``limit`` expired messages, oldest expiry first
        """
        stmt = (
            select(MessageModel)
            .where(MessageModel.expires_at < now)
            .order_by(MessageModel.expires_at.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_ids(self, session: AsyncSession, ids: Sequence[UUID]) -> int:
        """Delete messages in one statement; returns the number of rows removed."""
        if not ids:
            return 0
        stmt = delete(MessageModel).where(MessageModel.id.in_(list(ids)))
        result = await session.execute(stmt)
        return result.rowcount

    async def get_file_shares(self, session: AsyncSession) -> Sequence[MessageModel]:
        """Retrieve every message flagged as a file share."""
        stmt = select(MessageModel).where(MessageModel.is_file_share.is_(True))
        result = await session.execute(stmt)
        return result.scalars().all()


message_crud = MessageCRUD()
