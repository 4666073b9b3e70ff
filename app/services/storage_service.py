"""
Alibaba Cloud OSS (Object Storage Service) integration.

The chat never handles file bytes: clients upload straight to OSS through a
signed PUT URL and hand the resulting object key to the message or profile
endpoints. Reads go through signed GET URLs.
"""
import logging
import uuid
from pathlib import Path
from typing import Dict, Optional

import oss2

from app.config import settings

logger = logging.getLogger(__name__)


class StorageService:
    """Signed-URL access to the OSS bucket."""

    def __init__(self):
        """Initialize OSS bucket client with credentials from settings."""
        if not settings.oss_access_key_id or not settings.oss_access_key_secret:
            logger.warning("OSS credentials not configured. Signed URLs will be rejected by OSS.")

        self.auth = oss2.Auth(
            settings.oss_access_key_id,
            settings.oss_access_key_secret
        )
        self.bucket = oss2.Bucket(
            self.auth,
            settings.oss_endpoint,
            settings.oss_bucket_name
        )

    def _sanitize_filename(self, filename: str) -> str:
        """Strip path separators, null bytes and leading dots; cap length."""
        filename = filename.replace('/', '_').replace('\\', '_').replace('\x00', '')
        filename = filename.lstrip('.')
        if len(filename) > 100:
            path = Path(filename)
            filename = f"{path.stem[:100 - len(path.suffix)]}{path.suffix}"
        return filename or "file"

    def build_file_key(self, user_id: str, file_name: Optional[str] = None) -> str:
        """
        Generate a fresh object key under the uploader's prefix.

        Args:
            user_id: Uploading user
            file_name: Optional original filename, kept as a readable suffix

        Returns:
            Key in format ``uploads/{user_id}/{hex}_{name}``
        """
        unique_id = uuid.uuid4().hex[:16]
        if file_name:
            return f"uploads/{user_id}/{unique_id}_{self._sanitize_filename(file_name)}"
        return f"uploads/{user_id}/{unique_id}"

    def generate_upload_url(self, user_id: str, file_name: Optional[str] = None) -> Dict[str, str]:
        """
        Create an upload target for a client-side upload.

        Args:
            user_id: Uploading user
            file_name: Optional original filename

        Returns:
            ``{"upload_url": ..., "file_key": ...}``
        """
        file_key = self.build_file_key(user_id, file_name)
        upload_url = self.bucket.sign_url(
            "PUT",
            file_key,
            settings.oss_url_expiration_seconds,
            slash_safe=True
        )
        logger.info(f"Upload URL issued for user {user_id}: {file_key}")
        return {"upload_url": upload_url, "file_key": file_key}

    def get_file_url(self, file_key: Optional[str]) -> Optional[str]:
        """
        Signed download URL for an object key.

        Args:
            file_key: OSS object key (may be None)

        Returns:
            URL or None when there is no key
        """
        if not file_key:
            return None
        return self.bucket.sign_url(
            "GET",
            file_key,
            settings.oss_url_expiration_seconds,
            slash_safe=True
        )


storage_service = StorageService()
