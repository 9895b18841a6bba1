"""
File upload schemas.

Dependencies: pydantic
System role: Upload API contracts
"""

from chatrelay.models.common import CamelModel
from chatrelay.models.message import FileReference


class UploadResponse(CamelModel):
    """Response schema for POST /upload-multiple."""

    success: bool = True
    files: list[FileReference]


class FileDeletedResponse(CamelModel):
    """Response schema for DELETE /file/{file_id}."""

    success: bool = True
    file_id: str
    affected_messages: int


class MessageDeletedResponse(CamelModel):
    """Response schema for DELETE /api/message/{message_id}."""

    success: bool = True
    message_id: str
