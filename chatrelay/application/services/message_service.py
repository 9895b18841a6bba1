"""
Message service.

Durable message operations used by the broadcast coordinator, the HTTP
history endpoints and the expiration sweeper. Every database failure is
surfaced as PersistenceError so handlers can report it without crashing.

Dependencies: sqlalchemy, chatrelay.boundary.db
System role: Message persistence orchestration layer
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatrelay.boundary.db.base import utcnow
from chatrelay.boundary.db.CRUD.message_crud import message_crud
from chatrelay.boundary.db.CRUD.orphaned_file_crud import orphaned_file_crud
from chatrelay.boundary.db.models.message_model import MessageModel
from chatrelay.boundary.db.models.orphaned_file_model import OrphanReason
from chatrelay.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)
from chatrelay.models.message import FileReference, MessageHistoryPage, MessageResponse

logger = logging.getLogger(__name__)


def to_message_response(model: MessageModel) -> MessageResponse:
    """Convert an ORM row to its wire schema."""
    return MessageResponse(
        id=str(model.id),
        user_id=model.user_id,
        user_name=model.user_name,
        message=model.body,
        source_lang=model.source_lang,
        files=[FileReference.model_validate(f) for f in model.files or []],
        is_file_share=model.is_file_share,
        timestamp=model.created_at,
        expires_at=model.expires_at,
    )


def parse_uuid(value: str, resource: str) -> UUID:
    """Parse an identifier; malformed ids cannot exist, so they are not found."""
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise NotFoundError(resource, str(value))


class MessageService:
    """
    Message persistence operations.

    Args:
        session_factory: Async session factory bound to the message store
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def create_message(
        self,
        *,
        user_id: str,
        user_name: str,
        created_at: datetime,
        expires_at: datetime,
        body: str | None = None,
        source_lang: str | None = None,
        files: Sequence[FileReference] = (),
    ) -> MessageResponse:
        """
        Persist a text message or file share.

        Args:
            user_id: Author identifier
            user_name: Author display name
            created_at: Creation time
            expires_at: Expiry time (created_at + TTL)
            body: Text body for chat messages
            source_lang: Author's language
            files: File references for file shares

        Returns:
            MessageResponse: Stored message with its assigned id

        Raises:
            PersistenceError: Store unavailable or write failed
        """
        try:
            async with self._session_factory() as db:
                instance = await message_crud.create(
                    db,
                    user_id=user_id,
                    user_name=user_name,
                    body=body,
                    source_lang=source_lang,
                    files=[f.to_wire() for f in files],
                    is_file_share=bool(files),
                    created_at=created_at,
                    expires_at=expires_at,
                )
                await db.commit()
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to store message",
                extra={"user_id": user_id, "is_file_share": bool(files)},
            )
            raise PersistenceError(
                "Failed to store message",
                operation="create_message",
                details={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Message stored",
            extra={"message_id": str(instance.id), "user_id": user_id, "is_file_share": bool(files)},
        )
        return to_message_response(instance)

    async def get_recent(self, limit: int) -> list[MessageResponse]:
        """
        Most recent messages in chronological order.

        Raises:
            PersistenceError: Store unavailable
        """
        try:
            async with self._session_factory() as db:
                rows = await message_crud.get_recent(db, limit)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load message history", operation="get_recent") from e
        return [to_message_response(row) for row in reversed(rows)]

    async def get_page(self, page: int, limit: int) -> MessageHistoryPage:
        """
        One page of history; page 1 holds the newest messages.

        Messages inside a page are chronological.
        """
        offset = (page - 1) * limit
        try:
            async with self._session_factory() as db:
                total = await message_crud.count(db)
                rows = await message_crud.get_page(db, limit=limit, offset=offset)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load message history", operation="get_page") from e
        return MessageHistoryPage(
            messages=[to_message_response(row) for row in reversed(rows)],
            page=page,
            limit=limit,
            total=total,
            has_more=offset + len(rows) < total,
        )

    async def delete_message(self, message_id: str, requester_id: str) -> MessageResponse:
        """
        Delete a message on behalf of its owner.

        Files referenced by the message stay in storage; an orphan marker is
        recorded for each of them.

        Returns:
            MessageResponse: The deleted message

        Raises:
            NotFoundError: No such message
            PermissionDeniedError: Requester is not the author
            PersistenceError: Store unavailable or delete failed
        """
        if not requester_id:
            raise ValidationError("userId is required", field="userId")
        uid = parse_uuid(message_id, "message")
        try:
            async with self._session_factory() as db:
                message = await message_crud.get_by_id(db, uid)
                if message is None:
                    raise NotFoundError("message", message_id)
                if message.user_id != requester_id:
                    raise PermissionDeniedError(
                        "Only the author can delete this message",
                        requester_id=requester_id,
                        details={"message_id": message_id},
                    )
                deleted = to_message_response(message)
                orphaned_file_crud.add_for_messages(
                    db, [message], OrphanReason.MESSAGE_DELETED, orphaned_at=utcnow()
                )
                await message_crud.delete_by_id(db, uid)
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to delete message",
                operation="delete_message",
                details={"message_id": message_id},
            ) from e

        logger.info(
            "Message deleted by owner",
            extra={"message_id": message_id, "user_id": requester_id, "file_count": len(deleted.files)},
        )
        return deleted

    async def delete_expired(self, now: datetime, limit: int) -> list[str]:
        """
        Delete one batch of expired messages atomically.

        Selects up to ``limit`` messages with ``expires_at < now``, records
        orphan markers for their files and deletes them in one transaction.

        Returns:
            list[str]: Ids of the deleted messages (empty when nothing expired)

        Raises:
            PersistenceError: The batch was rolled back
        """
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    expired = await message_crud.get_expired(db, now, limit)
                    if not expired:
                        return []
                    orphaned_file_crud.add_for_messages(
                        db, expired, OrphanReason.MESSAGE_EXPIRED, orphaned_at=now
                    )
                    ids = [message.id for message in expired]
                    await message_crud.delete_by_ids(db, ids)
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Expiration batch failed",
                operation="delete_expired",
                details={"error_type": type(e).__name__},
            ) from e
        return [str(message_id) for message_id in ids]

    async def strip_file_reference(self, db: AsyncSession, file_id: str) -> list[str]:
        """
        Remove a file from every message embedding it, inside the caller's transaction.

        The rest of each message is left intact.

        Returns:
            list[str]: Ids of the messages that were changed
        """
        affected: list[str] = []
        for message in await message_crud.get_file_shares(db):
            files = message.files or []
            remaining = [f for f in files if not (isinstance(f, dict) and f.get("fileId") == file_id)]
            if len(remaining) != len(files):
                message.files = remaining
                affected.append(str(message.id))
        return affected
