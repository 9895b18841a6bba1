"""
Orphaned file marker ORM model.

Records that a file's originating message was deleted or expired while the
file itself stays in the blob store.

Dependencies: sqlalchemy, chatrelay.boundary.db.base
System role: Audit trail for files outliving their messages
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from chatrelay.boundary.db.base import Base, UTCDateTime, UUIDMixin, utcnow


class OrphanReason(str, Enum):
    """Why a file lost its originating message."""

    MESSAGE_EXPIRED = "message_expired"
    MESSAGE_DELETED = "message_deleted"


class OrphanedFileModel(Base, UUIDMixin):
    """
    Orphaned file marker.

    Attributes:
        file_id: File that remains in storage
        message_id: Message that referenced it
        reason: OrphanReason value
        orphaned_at: When the message went away
    """

    __tablename__ = "orphaned_files"

    file_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    message_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str] = mapped_column(String(32), nullable=False)
    orphaned_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
