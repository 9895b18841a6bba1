"""
Orphaned file marker CRUD operations.

Dependencies: sqlalchemy, chatrelay.boundary.db.models
System role: Orphan marker persistence
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatrelay.boundary.db.CRUD.base_crud import BaseCRUD
from chatrelay.boundary.db.models.message_model import MessageModel
from chatrelay.boundary.db.models.orphaned_file_model import OrphanReason, OrphanedFileModel


class OrphanedFileCRUD(BaseCRUD[OrphanedFileModel]):
    """CRUD operations for OrphanedFileModel."""

    def __init__(self) -> None:
        """Initialize OrphanedFileCRUD with OrphanedFileModel."""
        super().__init__(OrphanedFileModel)

    def add_for_messages(
        self,
        session: AsyncSession,
        messages: Sequence[MessageModel],
        reason: OrphanReason,
        orphaned_at: datetime,
    ) -> int:
        """
        Stage one marker per file reference carried by the given messages.

        Markers are added to the session and written by the caller's flush
        or commit, inside the same transaction as the message deletion.

        Returns:
            Number of markers staged
        """
        staged = 0
        for message in messages:
            for file_ref in message.files or []:
                file_id = file_ref.get("fileId") if isinstance(file_ref, dict) else None
                if not file_id:
                    continue
                session.add(
                    OrphanedFileModel(
                        file_id=str(file_id),
                        message_id=str(message.id),
                        reason=reason.value,
                        orphaned_at=orphaned_at,
                    )
                )
                staged += 1
        return staged

    async def get_by_file_id(self, session: AsyncSession, file_id: str) -> Sequence[OrphanedFileModel]:
        stmt = select(OrphanedFileModel).where(OrphanedFileModel.file_id == file_id)
        result = await session.execute(stmt)
        return result.scalars().all()


orphaned_file_crud = OrphanedFileCRUD()
