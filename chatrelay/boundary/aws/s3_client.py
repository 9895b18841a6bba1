"""
S3 client for shared chat files.

Uploads files to the bucket, builds their public URLs and deletes them.
Blocking boto3 calls are meant to be run in the thread pool by callers.

Dependencies: boto3
System role: Blob store for uploaded files
"""

import re
import time
import uuid
from typing import BinaryIO
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from chatrelay.core.exceptions import PersistenceError

_WHITESPACE = re.compile(r"\s+")


def build_object_key(prefix: str, filename: str, now_ms: int | None = None) -> str:
    """
    Build the object key for an upload.

    Keys look like ``chat_files/1718000000000_3f2a..._my_photo.png``: an
    epoch millisecond stamp plus a random hex token, so same-named uploads
    in one batch never share a key. Whitespace is replaced with underscores.
    """
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    stamp = f"{stamp}_{uuid.uuid4().hex}"
    safe_name = _WHITESPACE.sub("_", filename.strip()).replace("/", "_") or "file"
    prefix = prefix.strip("/")
    return f"{prefix}/{stamp}_{safe_name}" if prefix else f"{stamp}_{safe_name}"


class S3FileStore:
    """S3 client for the shared files bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        public_base_url: str | None = None,
        s3_client=None,
    ) -> None:
        """
        Initialize S3 client for the files bucket.

        Args:
            bucket: S3 bucket name for file storage
            region: AWS region for S3 bucket
            public_base_url: Base URL objects are served from (CDN), if any
            s3_client: Preconfigured boto3 client, mainly for tests
        """
        self._bucket = bucket
        self._region = region
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    def public_url(self, key: str) -> str:
        """Absolute URL at which any client can fetch the object."""
        if self._public_base_url:
            return f"{self._public_base_url}/{quote(key)}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{quote(key)}"

    def upload(self, key: str, fileobj: BinaryIO, content_type: str) -> str:
        """
        Upload a file object.

        Args:
            key: Object key
            fileobj: Readable binary file object
            content_type: MIME type stored with the object

        Returns:
            str: Public URL of the uploaded object

        Raises:
            PersistenceError: Upload failed
        """
        try:
            self._s3_client.upload_fileobj(
                fileobj,
                self._bucket,
                key,
                ExtraArgs={"ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as e:
            raise PersistenceError(
                f"Failed to upload {key}",
                operation="upload",
                details={"error_msg": str(e)},
            ) from e
        return self.public_url(key)

    def delete(self, key: str) -> None:
        """
        Delete an object; deleting a missing key is not an error.

        Raises:
            PersistenceError: Deletion failed
        """
        try:
            self._s3_client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise PersistenceError(
                f"Failed to delete {key}",
                operation="delete_blob",
                details={"error_msg": str(e)},
            ) from e
