"""
File API endpoints.

Routes:
- POST /upload-multiple - Upload shared files (multipart ``files[]`` + ``userId``)
- DELETE /file/{file_id}?userId= - Owner-only deletion with retraction broadcast

Dependencies: chatrelay.application.services, chatrelay.core.broadcast
System role: Shared file HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from chatrelay.api.deps import get_coordinator, get_file_service
from chatrelay.api.routers.router_utils import handle_relay_errors
from chatrelay.application.services.file_service import FileService, IncomingFile
from chatrelay.core.broadcast import BroadcastCoordinator
from chatrelay.models.file import FileDeletedResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


@router.post("/upload-multiple")
@handle_relay_errors
async def upload_multiple(
    files: list[UploadFile] = File(..., alias="files[]"),
    user_id: str = Form("", alias="userId"),
    file_service: FileService = Depends(get_file_service),
):
    """
    Upload one or more files to the shared store.

    The client announces the returned references with a ``file_shared``
    event afterwards.

    Returns:
        UploadResponse: ``{success, files: [{fileId, name, mimetype, size, url}]}``
    """
    logger.info(
        "File upload request received",
        extra={"user_id": user_id, "file_count": len(files)},
    )
    # One byte past the limit is enough for the size check to reject the file.
    read_limit = file_service.max_file_size_bytes + 1
    incoming = [
        IncomingFile(
            filename=upload.filename or "",
            content_type=upload.content_type or "application/octet-stream",
            content=await upload.read(read_limit),
        )
        for upload in files
    ]
    stored = await file_service.upload_files(user_id, incoming)
    return UploadResponse(files=stored).to_wire()


@router.delete("/file/{file_id}")
@handle_relay_errors
async def delete_file(
    file_id: str,
    user_id: str = Query("", alias="userId"),
    coordinator: BroadcastCoordinator = Depends(get_coordinator),
):
    """
    Delete a file owned by ``userId``.

    The file is removed from every message embedding it and a
    ``file_deleted`` event is broadcast.

    Raises:
        403: Requester is not the uploader
        404: No such file
    """
    affected = await coordinator.delete_file(user_id, file_id)
    return FileDeletedResponse(file_id=file_id, affected_messages=len(affected)).to_wire()
