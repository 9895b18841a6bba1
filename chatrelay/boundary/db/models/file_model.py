"""
File ORM model.

A file uploaded to the blob store. Its lifecycle is independent of the
messages that reference it.

Dependencies: sqlalchemy, chatrelay.boundary.db.base
System role: Uploaded file ownership and blob location
"""

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chatrelay.boundary.db.base import Base, TimestampMixin, UUIDMixin


class FileModel(Base, UUIDMixin, TimestampMixin):
    """
    Uploaded file record.

    Attributes:
        id: UUID primary key, exposed as ``fileId``
        user_id: Uploader and owner
        name: Original filename
        mimetype: MIME type reported at upload
        size: Size in bytes
        url: Absolute public URL
        storage_key: Object key in the blob store
    """

    __tablename__ = "files"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mimetype: Mapped[str] = mapped_column(String(128), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    storage_key: Mapped[str] = mapped_column(String(512), nullable=False)
