"""Content Access Gate — exchanges one access token for one signed delivery URL.

Order matters: the token is consumed before any other check, so it is
spent even when the request is later denied, and a retried request can
never reuse it. The kit scope comes only from the consumed token row.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from qrkit.core.access import TrustedExecutor
from qrkit.core.config import settings
from qrkit.core.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from qrkit.domain.mixins import utcnow
from qrkit.repositories.content import ContentRepository
from qrkit.repositories.kit import KitItemRepository
from qrkit.services.storage import CloudinaryStorage, resource_type_for
from qrkit.services.tokens import TokenConsumer

logger = logging.getLogger(__name__)


@dataclass
class ContentAccess:
    content_url: str
    signed_url: str
    content_type: str
    content_id: str
    title: str | None
    mime_type: str | None


class ContentAccessGate:
    def __init__(
        self,
        executor: TrustedExecutor,
        storage: CloudinaryStorage,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._consumer = TokenConsumer(executor, clock)
        self._items = KitItemRepository(executor.session)
        self._contents = ContentRepository(executor.session)
        self._storage = storage

    async def grant_content_access(
        self, raw_token: str, content_type: str, content_id: str
    ) -> ContentAccess:
        if not content_type or not content_id:
            raise InvalidInputError("Content type and id are required", code="INVALID_REQUEST")
        content_type = content_type.upper()

        # 1. Spend the token (raises INVALID_TOKEN)
        token = await self._consumer.consume(raw_token)

        # 2./3. Scope is the token's kit; caller-supplied ids only select within it
        if not await self._items.has_member(token.kit_id, content_type, content_id):
            logger.info(
                "Content access denied kit=%s %s/%s", token.kit_id, content_type, content_id
            )
            raise ForbiddenError("Content is not part of this kit", code="ACCESS_DENIED")

        content = await self._contents.get_by_id(content_id)
        if content is None:
            raise NotFoundError("Content", content_id, code="CONTENT_NOT_FOUND")

        # 4. Time-boxed delivery URL (raises SERVICE_CONFIGURATION_ERROR if unconfigured)
        signed = self._storage.signed_url(
            content_id, resource_type_for(content_type), settings.signed_url_ttl_seconds
        )
        logger.info("Content access granted user=%s kit=%s content=%s", token.user_id, token.kit_id, content_id)

        return ContentAccess(
            content_url=f"/content/{content_type.lower()}/{content_id}",
            signed_url=signed,
            content_type=content_type,
            content_id=content_id,
            title=content.title,
            mime_type=content.mime_type,
        )
