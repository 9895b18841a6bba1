"""
File CRUD operations.

Dependencies: sqlalchemy, chatrelay.boundary.db.models
System role: Uploaded file persistence operations
"""

from chatrelay.boundary.db.CRUD.base_crud import BaseCRUD
from chatrelay.boundary.db.models.file_model import FileModel


class FileCRUD(BaseCRUD[FileModel]):
    """CRUD operations for FileModel."""

    def __init__(self) -> None:
        """Initialize FileCRUD with FileModel."""
        super().__init__(FileModel)


file_crud = FileCRUD()
