"""Storage collaborator — signed delivery URLs and uploads via Cloudinary.

Assets are uploaded with the `authenticated` delivery type, so they can
only be fetched through time-boxed signed URLs produced here.
"""

from __future__ import annotations

import logging
import time
from typing import Any, BinaryIO

import cloudinary.uploader
import cloudinary.utils

from qrkit.core.config import settings
from qrkit.core.exceptions import AppException, ServiceConfigurationError

logger = logging.getLogger(__name__)

DELIVERY_TYPE = "authenticated"


def resource_type_for(content_type: str) -> str:
    """VIDEO -> video, IMAGE -> image, anything else -> raw."""
    kind = (content_type or "").upper()
    if kind == "VIDEO":
        return "video"
    if kind == "IMAGE":
        return "image"
    return "raw"


def content_type_for_mime(mime_type: str | None) -> str:
    if not mime_type:
        return "FILE"
    if mime_type.startswith("video/"):
        return "VIDEO"
    if mime_type.startswith("image/"):
        return "IMAGE"
    return "FILE"


class StorageError(AppException):
    """The storage provider rejected or failed a request."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502, code="STORAGE_ERROR")


class CloudinaryStorage:
    """Black-box signer/uploader. Never exposes credentials to callers."""

    def __init__(
        self,
        cloud_name: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
    ):
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret

    @classmethod
    def from_settings(cls) -> "CloudinaryStorage":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
        )

    def _credentials(self) -> dict[str, str]:
        # Fail closed: a missing credential denies delivery instead of serving unsigned
        if not (self._cloud_name and self._api_key and self._api_secret):
            logger.error("Cloudinary credentials are not configured")
            raise ServiceConfigurationError("Storage provider credentials are not configured")
        return {
            "cloud_name": self._cloud_name,
            "api_key": self._api_key,
            "api_secret": self._api_secret,
        }

    def signed_url(self, resource_id: str, resource_type: str, expires_in: int) -> str:
        creds = self._credentials()
        if not resource_id:
            raise StorageError("Missing resource id")
        expires_at = int(time.time()) + expires_in
        try:
            return cloudinary.utils.private_download_url(
                resource_id,
                "",
                resource_type=resource_type,
                type=DELIVERY_TYPE,
                attachment=False,
                expires_at=expires_at,
                **creds,
            )
        except Exception as exc:
            logger.error("Cloudinary signing failed for %s: %s", resource_id, exc)
            raise StorageError("Could not sign delivery URL") from exc

    def upload(self, file: BinaryIO, public_id: str, resource_type: str = "auto") -> dict[str, Any]:
        creds = self._credentials()
        try:
            result = cloudinary.uploader.upload(
                file,
                public_id=public_id,
                resource_type=resource_type,
                type=DELIVERY_TYPE,
                overwrite=False,
                **creds,
            )
        except Exception as exc:
            logger.error("Cloudinary upload failed for %s: %s", public_id, exc)
            raise StorageError("Upload to storage provider failed") from exc
        logger.info("Uploaded %s to storage (%s bytes)", public_id, result.get("bytes"))
        return result


def get_storage() -> CloudinaryStorage:
    """FastAPI dependency; overridden in tests."""
    return CloudinaryStorage.from_settings()
