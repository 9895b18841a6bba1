"""
File service.

Uploads shared files to the blob store, records their ownership and
handles owner-only deletion. Deleting a file retracts its reference from
every message that embeds it; deleting a message never deletes its files.

Dependencies: sqlalchemy, fastapi.concurrency, chatrelay.boundary
System role: Shared file lifecycle orchestration
"""

import io
import logging
from dataclasses import dataclass
from typing import Sequence

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from chatrelay.application.services.message_service import MessageService, parse_uuid
from chatrelay.boundary.aws.s3_client import S3FileStore, build_object_key
from chatrelay.boundary.db.CRUD.file_crud import file_crud
from chatrelay.configs.storage import StorageSettings
from chatrelay.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)
from chatrelay.models.message import FileReference

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    """File read from a multipart upload."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class FileService:
    """
    Shared file operations.

    Args:
        session_factory: Async session factory
        blob_store: S3 store holding file contents
        storage_settings: Upload limits and key prefix
        message_service: Used to retract deleted files from messages
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        blob_store: S3FileStore,
        storage_settings: StorageSettings,
        message_service: MessageService,
    ) -> None:
        self._session_factory = session_factory
        self._blob_store = blob_store
        self._settings = storage_settings
        self._message_service = message_service

    @property
    def max_file_size_bytes(self) -> int:
        return self._settings.max_file_size_bytes

    def _validate(self, user_id: str, uploads: Sequence[IncomingFile]) -> None:
        if not user_id or not user_id.strip():
            raise ValidationError("userId is required", field="userId")
        if not uploads:
            raise ValidationError("No files uploaded", field="files[]")

        allowed = set(self._settings.allowed_mime_types)
        for upload in uploads:
            if not upload.filename:
                raise ValidationError("Filename is required", field="files[]")
            if upload.content_type not in allowed:
                raise ValidationError(
                    f"File type '{upload.content_type}' not allowed",
                    field="files[]",
                    details={"filename": upload.filename, "mimetype": upload.content_type},
                )
            if upload.size > self._settings.max_file_size_bytes:
                raise ValidationError(
                    f"File too large. Maximum size: {self._settings.max_file_size_bytes // (1024 * 1024)}MB",
                    field="files[]",
                    details={"filename": upload.filename, "size": upload.size},
                )

    async def upload_files(self, user_id: str, uploads: Sequence[IncomingFile]) -> list[FileReference]:
        """
        Store uploaded files and record their ownership.

        Every file is validated before any is stored, so a rejected batch
        leaves nothing behind.

        Args:
            user_id: Uploader, recorded as owner
            uploads: Files read from the request

        Returns:
            list[FileReference]: One reference per stored file, in upload order

        Raises:
            ValidationError: Missing user, disallowed MIME type or oversize file
            PersistenceError: Blob store or database failure
        """
        self._validate(user_id, uploads)

        stored: list[tuple[IncomingFile, str, str]] = []
        try:
            for upload in uploads:
                key = build_object_key(self._settings.prefix, upload.filename)
                url = await run_in_threadpool(
                    self._blob_store.upload, key, io.BytesIO(upload.content), upload.content_type
                )
                stored.append((upload, key, url))
        except PersistenceError:
            await self._discard_blobs([key for _, key, _ in stored])
            raise

        try:
            async with self._session_factory() as db:
                rows = [
                    await file_crud.create(
                        db,
                        user_id=user_id,
                        name=upload.filename,
                        mimetype=upload.content_type,
                        size=upload.size,
                        url=url,
                        storage_key=key,
                    )
                    for upload, key, url in stored
                ]
                await db.commit()
        except SQLAlchemyError as e:
            await self._discard_blobs([key for _, key, _ in stored])
            raise PersistenceError(
                "Failed to record uploaded files",
                operation="upload_files",
                details={"error_type": type(e).__name__},
            ) from e

        logger.info("Files uploaded", extra={"user_id": user_id, "file_count": len(rows)})
        return [
            FileReference(
                file_id=str(row.id),
                name=row.name,
                mimetype=row.mimetype,
                size=row.size,
                url=row.url,
                user_id=row.user_id,
            )
            for row in rows
        ]

    async def delete_file(self, file_id: str, requester_id: str) -> list[str]:
        """
        Delete a file on behalf of its owner.

        The file row is removed and its reference stripped from every
        message in one transaction; the blob is deleted afterwards.

        Returns:
            list[str]: Ids of messages whose file lists changed

        Raises:
            NotFoundError: No such file
            PermissionDeniedError: Requester is not the uploader
            PersistenceError: Database failure
        """
        if not requester_id:
            raise ValidationError("userId is required", field="userId")
        uid = parse_uuid(file_id, "file")
        try:
            async with self._session_factory() as db:
                record = await file_crud.get_by_id(db, uid)
                if record is None:
                    raise NotFoundError("file", file_id)
                if record.user_id != requester_id:
                    raise PermissionDeniedError(
                        "Only the uploader can delete this file",
                        requester_id=requester_id,
                        details={"file_id": file_id},
                    )
                storage_key = record.storage_key
                await file_crud.delete_by_id(db, uid)
                affected = await self._message_service.strip_file_reference(db, str(uid))
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(
                "Failed to delete file",
                operation="delete_file",
                details={"file_id": file_id},
            ) from e

        try:
            await run_in_threadpool(self._blob_store.delete, storage_key)
        except PersistenceError:
            logger.exception(
                "File record deleted but blob removal failed",
                extra={"file_id": file_id, "storage_key": storage_key},
            )

        logger.info(
            "File deleted by owner",
            extra={"file_id": file_id, "user_id": requester_id, "affected_messages": len(affected)},
        )
        return affected

    async def _discard_blobs(self, keys: Sequence[str]) -> None:
        for key in keys:
            try:
                await run_in_threadpool(self._blob_store.delete, key)
            except PersistenceError:
                logger.warning("Failed to discard uploaded blob", extra={"storage_key": key})
