"""ORM models for the relay's durable state."""

from chatrelay.boundary.db.models.file_model import FileModel
from chatrelay.boundary.db.models.message_model import MessageModel
from chatrelay.boundary.db.models.orphaned_file_model import OrphanReason, OrphanedFileModel
from chatrelay.boundary.db.models.translation_cache_model import TranslationCacheModel

__all__ = [
    "FileModel",
    "MessageModel",
    "OrphanReason",
    "OrphanedFileModel",
    "TranslationCacheModel",
]
