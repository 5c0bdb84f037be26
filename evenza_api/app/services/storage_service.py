"""
Object storage for uploaded files.

Files are validated against a small table of allowed MIME types and
sizes, then written to S3 (or an S3 compatible service such as MinIO
when ``AWS_S3_ENDPOINT_URL`` is set) under ``<folder>/<uuid>.<ext>``.
"""

import logging
import re
import uuid
from typing import Any, Dict

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import settings
from ..core.states import MediaType

logger = logging.getLogger(__name__)

ALLOWED_FILE_TYPES = {
    MediaType.IMAGE: {"image/jpeg", "image/png", "image/gif"},
    MediaType.VIDEO: {"video/mp4", "video/quicktime", "video/x-msvideo"},
}

MAX_FILE_SIZE = {
    MediaType.IMAGE: 5 * 1024 * 1024,
    MediaType.VIDEO: 50 * 1024 * 1024,
}

_FOLDER_RE = re.compile(r"^[A-Za-z0-9_\-]+(/[A-Za-z0-9_\-]+)*$")


class StorageError(Exception):
    """The object store rejected or failed the operation."""


def get_s3_client():
    """
    Initializes and returns an S3 client.
    Conditionally configures the endpoint_url for local development with MinIO.
    """
    options: Dict[str, Any] = {
        "region_name": settings.aws_region,
    }
    if settings.aws_access_key_id:
        options["aws_access_key_id"] = settings.aws_access_key_id
        options["aws_secret_access_key"] = settings.aws_secret_access_key
    if settings.aws_s3_endpoint_url:
        options["endpoint_url"] = settings.aws_s3_endpoint_url
    return boto3.client("s3", **options)


class StorageService:
    """Validate and store uploaded files."""

    @staticmethod
    def validate(media_type: MediaType, content_type: str, size: int) -> None:
        """Raise ``ValueError`` unless the file fits the allowed table."""
        if content_type not in ALLOWED_FILE_TYPES[media_type]:
            allowed = ", ".join(sorted(ALLOWED_FILE_TYPES[media_type]))
            raise ValueError(f"Invalid file type {content_type}. Allowed: {allowed}")
        if size == 0:
            raise ValueError("File is empty")
        if size > MAX_FILE_SIZE[media_type]:
            limit_mb = MAX_FILE_SIZE[media_type] // (1024 * 1024)
            raise ValueError(f"File too large. Maximum size for {media_type.value} is {limit_mb}MB")

    @staticmethod
    def object_key(folder: str, filename: str) -> str:
        folder = folder.strip("/") or "uploads"
        if not _FOLDER_RE.match(folder):
            raise ValueError("Invalid folder name")
        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        return f"{folder}/{uuid.uuid4()}.{extension}"

    @staticmethod
    def public_url(key: str) -> str:
        if settings.aws_s3_endpoint_url:
            return f"{settings.aws_s3_endpoint_url.rstrip('/')}/{settings.aws_s3_bucket}/{key}"
        return f"https://{settings.aws_s3_bucket}.s3.amazonaws.com/{key}"

    @classmethod
    def upload(cls, data: bytes, filename: str, content_type: str, media_type: MediaType, folder: str) -> Dict[str, Any]:
        """Validate and upload ``data``; return the stored object's description."""
        cls.validate(media_type, content_type, len(data))
        key = cls.object_key(folder, filename)
        try:
            get_s3_client().put_object(
                Bucket=settings.aws_s3_bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Upload of %s to bucket %s failed: %s", key, settings.aws_s3_bucket, exc)
            raise StorageError("Failed to upload file") from exc
        logger.info("Uploaded %s (%d bytes)", key, len(data))
        return {
            "url": cls.public_url(key),
            "key": key,
            "type": media_type,
            "size": len(data),
            "content_type": content_type,
        }

    @classmethod
    def delete(cls, url: str) -> None:
        """Remove the object behind a public URL produced by ``upload``."""
        prefix = cls.public_url("")
        if not url.startswith(prefix):
            logger.warning("Not deleting %s: not an object of bucket %s", url, settings.aws_s3_bucket)
            return
        key = url[len(prefix):]
        try:
            get_s3_client().delete_object(Bucket=settings.aws_s3_bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Deleting %s failed: %s", key, exc)
            raise StorageError("Failed to delete file") from exc
