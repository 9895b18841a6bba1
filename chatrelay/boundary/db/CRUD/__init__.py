"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from chatrelay.boundary.db.CRUD import message_crud

    message = await message_crud.get_by_id(db, message_id)
"""

from chatrelay.boundary.db.CRUD.base_crud import BaseCRUD
from chatrelay.boundary.db.CRUD.file_crud import FileCRUD, file_crud
from chatrelay.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from chatrelay.boundary.db.CRUD.orphaned_file_crud import OrphanedFileCRUD, orphaned_file_crud
from chatrelay.boundary.db.CRUD.translation_cache_crud import (
    TranslationCacheCRUD,
    translation_cache_crud,
)

__all__ = [
    "BaseCRUD",
    "FileCRUD",
    "file_crud",
    "MessageCRUD",
    "message_crud",
    "OrphanedFileCRUD",
    "orphaned_file_crud",
    "TranslationCacheCRUD",
    "translation_cache_crud",
]
