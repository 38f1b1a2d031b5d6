"""
Object storage for uploaded files.

Files are written to a single S3-compatible bucket. The boto3 client is
created once when the service is built and reused for every request.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, List, Optional
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from task_api.core.config import Settings
from task_api.core.exceptions import (
    NotConfiguredError,
    StorageError,
    ValidationError,
)
from task_api.schemas.file import StoredFile, UploadedFile

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "application/pdf",
        "text/plain",
    }
)
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10 MiB


def validate_upload(
    filename: Optional[str], content_type: Optional[str], size: int
) -> None:
    """Reject an upload before anything is sent to storage.

    Raises:
        ValidationError: If no file was sent, its type is not allowed or
            it is larger than ``MAX_UPLOAD_SIZE``.
    """
    if not filename:
        raise ValidationError("No file uploaded")
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(
            f"Invalid file type: {content_type}. Allowed types: "
            + ", ".join(sorted(ALLOWED_CONTENT_TYPES))
        )
    if size > MAX_UPLOAD_SIZE:
        raise ValidationError(
            f"File too large: {size} bytes (max {MAX_UPLOAD_SIZE} bytes)"
        )


class StorageService:
    """Upload and list objects in the configured bucket."""

    def __init__(self, settings: Settings, client: Any = None):
        self.bucket_name = settings.STORAGE_BUCKET_NAME
        self.client = None
        self.is_configured = False

        if not settings.storage_configured:
            logger.info("Object storage not configured - missing credentials")
            return

        try:
            self.client = client or boto3.client(
                "s3",
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_S3_REGION_NAME,
                endpoint_url=settings.AWS_S3_ENDPOINT_URL,
            )
        except (BotoCoreError, ValueError) as e:
            logger.error("Error initializing object storage: %s", e)
            return

        self.is_configured = True
        logger.info(
            "Object storage service initialized (bucket: %s)", self.bucket_name
        )

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise NotConfiguredError("Storage service not configured")

    def object_url(self, key: str) -> str:
        """Path-style URL of an object in the bucket."""
        endpoint = self.client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{self.bucket_name}/{quote(key)}"

    def upload_file(
        self, filename: str, data: bytes, content_type: str
    ) -> UploadedFile:
        """Store ``data`` under a timestamped key and return its metadata.

        The declared content type is trusted as-is.

        Raises:
            NotConfiguredError: If storage credentials are absent
            StorageError: If the storage service rejects the upload
        """
        self._require_configured()

        key = f"{int(time.time() * 1000)}-{filename}"
        logger.info("Uploading %s as %s", filename, key)
        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Error uploading file %s: %s", key, e, exc_info=True)
            raise StorageError(f"Failed to upload file: {e}") from e

        return UploadedFile(
            file_name=key,
            original_name=filename,
            url=self.object_url(key),
            size=len(data),
            content_type=content_type,
            uploaded_at=datetime.now(timezone.utc),
        )

    def list_files(self) -> List[StoredFile]:
        """List every object in the bucket.

        Object listings carry no content type, so each object is looked up
        with a HEAD request.
        """
        self._require_configured()

        files = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name):
                for obj in page.get("Contents", []):
                    head = self.client.head_object(
                        Bucket=self.bucket_name, Key=obj["Key"]
                    )
                    files.append(
                        StoredFile(
                            name=obj["Key"],
                            size=obj["Size"],
                            content_type=head.get("ContentType"),
                            created_on=obj.get("LastModified"),
                            url=self.object_url(obj["Key"]),
                        )
                    )
        except (BotoCoreError, ClientError) as e:
            logger.error("Error listing files: %s", e, exc_info=True)
            raise StorageError(f"Failed to list files: {e}") from e

        return files
