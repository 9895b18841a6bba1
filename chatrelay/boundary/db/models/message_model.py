"""
Message ORM model.

Represents a chat message or a file share. Messages are never mutated after
creation, except for the ``files`` list shrinking when a referenced file is
deleted independently.

Dependencies: sqlalchemy, chatrelay.boundary.db.base
System role: Message persistence for history and expiration
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chatrelay.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class MessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Message ORM model.

    Attributes:
        id: UUID primary key assigned on creation
        user_id: Author's client-generated identifier
        user_name: Author's display name at send time
        body: Text content, None for file shares
        source_lang: Language the author wrote in
        files: File reference dicts, empty for text messages
        is_file_share: Discriminant between text and file share
        created_at: Creation timestamp (UTC)
        expires_at: created_at + TTL, drives the expiration sweep
    """

    __tablename__ = "messages"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(64), nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_lang: Mapped[str | None] = mapped_column(String(16), nullable=True)
    files: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_file_share: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
