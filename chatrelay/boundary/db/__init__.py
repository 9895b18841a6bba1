"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin, UTCDateTime: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Connection management
  - MessageModel, FileModel, OrphanedFileModel, TranslationCacheModel: Durable entities
  - message_crud, file_crud, orphaned_file_crud, translation_cache_crud: CRUD singletons

Dependencies: sqlalchemy, chatrelay.configs
System role: Document store for messages, files, orphan markers and translations
"""

from chatrelay.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin
from chatrelay.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from chatrelay.boundary.db.models import (
    FileModel,
    MessageModel,
    OrphanReason,
    OrphanedFileModel,
    TranslationCacheModel,
)
from chatrelay.boundary.db.CRUD import (
    BaseCRUD,
    file_crud,
    message_crud,
    orphaned_file_crud,
    translation_cache_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    "FileModel",
    "MessageModel",
    "OrphanReason",
    "OrphanedFileModel",
    "TranslationCacheModel",
    "BaseCRUD",
    "file_crud",
    "message_crud",
    "orphaned_file_crud",
    "translation_cache_crud",
]
