"""Application services."""

from chatrelay.application.services.file_service import FileService, IncomingFile
from chatrelay.application.services.message_service import MessageService

__all__ = ["FileService", "IncomingFile", "MessageService"]
