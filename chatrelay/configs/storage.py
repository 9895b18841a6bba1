"""
Blob storage configuration settings.

S3 bucket for shared files plus upload limits.

Dependencies: pydantic, pydantic_settings
System role: File upload and blob store configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from chatrelay.configs.base import BaseSettings

DEFAULT_ALLOWED_MIME_TYPES = [
    # Images
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "image/bmp",
    "image/tiff",
    "image/apng",
    "image/avif",
    "image/heic",
    "image/heif",
    # Documents
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/pdf",
    "text/plain",
    "application/rtf",
]


class StorageSettings(BaseSettings):
    """S3 configuration for shared chat files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(default="chatrelay-files", description="S3 bucket for shared files")
    region: str = Field(default="us-east-1", description="AWS region of the bucket")
    prefix: str = Field(default="chat_files", description="Key prefix for uploaded objects")
    public_base_url: str | None = Field(
        default=None,
        description="Public base URL (CDN) for objects; defaults to the S3 virtual-host URL",
    )
    max_file_size_bytes: int = Field(
        default=20 * 1024 * 1024,
        gt=0,
        description="Largest accepted upload",
    )
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_MIME_TYPES),
        description="MIME types accepted for upload",
    )
