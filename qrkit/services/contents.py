"""Content metadata administration and uploads to the storage provider."""

from __future__ import annotations

import io
import logging
import uuid

from qrkit.core.access import TrustedExecutor
from qrkit.core.exceptions import ConflictError, InvalidInputError
from qrkit.core.pagination import PaginationParams
from qrkit.domain.content import Content
from qrkit.repositories.content import ContentRepository
from qrkit.services.storage import CloudinaryStorage, content_type_for_mime, resource_type_for

logger = logging.getLogger(__name__)

CONTENT_FOLDER = "qrkit/content"


class ContentAdminService:
    def __init__(self, executor: TrustedExecutor, storage: CloudinaryStorage | None = None):
        self._admin_id = executor.actor_id
        self._session = executor.session
        self._contents = ContentRepository(executor.session)
        self._storage = storage

    async def create_content(
        self,
        *,
        content_type: str,
        content_id: str | None = None,
        title: str | None = None,
        description: str | None = None,
        filename: str | None = None,
        mime_type: str | None = None,
        size: int | None = None,
    ) -> Content:
        """Register metadata for an asset that already lives in storage."""
        content_type = (content_type or "").strip().upper()
        if not content_type:
            raise InvalidInputError("contentType is required")
        content_id = (content_id or "").strip() or f"{CONTENT_FOLDER}/{uuid.uuid4()}"
        if await self._contents.get_by_id(content_id) is not None:
            raise ConflictError(f"Content '{content_id}' already exists", code="DUPLICATE_CONTENT")

        content = await self._contents.create(
            id=content_id,
            content_type=content_type,
            title=title,
            description=description,
            filename=filename,
            mime_type=mime_type,
            bytes=size,
            uploaded_by=self._admin_id,
        )
        await self._session.commit()
        logger.info("Admin %s registered content %s (%s)", self._admin_id, content_id, content_type)
        return content

    async def upload_content(
        self,
        data: bytes,
        *,
        filename: str | None,
        mime_type: str | None,
        content_type: str | None = None,
        title: str | None = None,
        description: str | None = None,
    ) -> Content:
        """Push bytes to storage under a fresh public id, then record the metadata row."""
        if self._storage is None:
            raise RuntimeError("ContentAdminService.upload_content requires a storage provider")
        kind = (content_type or "").strip().upper() or content_type_for_mime(mime_type)
        public_id = f"{CONTENT_FOLDER}/{uuid.uuid4()}"

        result = self._storage.upload(
            io.BytesIO(data), public_id=public_id, resource_type=resource_type_for(kind)
        )
        return await self.create_content(
            content_type=kind,
            content_id=result.get("public_id", public_id),
            title=title or filename,
            description=description,
            filename=filename,
            mime_type=mime_type,
            size=result.get("bytes", len(data)),
        )

    async def list_contents(
        self, pagination: PaginationParams, content_type: str | None = None
    ) -> tuple[list[Content], int]:
        return await self._contents.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"content_type": content_type.upper() if content_type else None},
        )
