"""
Message domain schemas.

Messages, file references and session summaries as they travel over the
WebSocket and HTTP surfaces.

Dependencies: pydantic
System role: Message and file reference contracts
"""

from datetime import datetime

from pydantic import AliasChoices, Field

from chatrelay.models.common import CamelModel


class FileReference(CamelModel):
    """
    Descriptor of a shared file stored in the blob store.

    Attributes:
        file_id: Identifier generated at upload time
        name: Original filename
        mimetype: MIME type of the file
        size: Size in bytes
        url: Absolute URL resolvable by any client
        user_id: Owner of the file, when known
    """

    file_id: str = Field(min_length=1)
    name: str
    mimetype: str = Field(
        default="application/octet-stream",
        validation_alias=AliasChoices("mimetype", "mimeType", "mime_type"),
    )
    size: int = Field(default=0, ge=0)
    url: str
    user_id: str | None = None


class MessageResponse(CamelModel):
    """
    Persisted chat message or file share.

    ``message`` carries the text body and is None for file shares; ``files``
    is empty for text messages.
    """

    id: str
    user_id: str
    user_name: str
    message: str | None = None
    source_lang: str | None = None
    files: list[FileReference] = Field(default_factory=list)
    is_file_share: bool = False
    timestamp: datetime
    expires_at: datetime


class SessionSummary(CamelModel):
    """Public view of an active session."""

    user_id: str
    user_name: str
    joined_at: datetime
    last_seen_at: datetime


class MessageHistoryPage(CamelModel):
    """Page of message history, chronological within the page."""

    messages: list[MessageResponse]
    page: int
    limit: int
    total: int
    has_more: bool
