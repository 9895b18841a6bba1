"""AWS boundary: S3 blob store for shared files."""

from chatrelay.boundary.aws.s3_client import S3FileStore, build_object_key

__all__ = ["S3FileStore", "build_object_key"]
