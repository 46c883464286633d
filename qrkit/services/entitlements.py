"""Kit, kit-membership and QR-to-kit grant administration."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from qrkit.core.access import TrustedExecutor
from qrkit.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from qrkit.core.pagination import PaginationParams
from qrkit.domain.kit import Kit, KitItem, QRKitGrant
from qrkit.domain.mixins import utcnow
from qrkit.repositories.grant import GrantRepository
from qrkit.repositories.kit import KitItemRepository, KitRepository
from qrkit.repositories.qr import QRCodeRepository

logger = logging.getLogger(__name__)


class KitAdminService:
    def __init__(self, executor: TrustedExecutor, clock: Callable[[], datetime] = utcnow):
        self._admin_id = executor.actor_id
        self._session = executor.session
        self._kits = KitRepository(executor.session)
        self._items = KitItemRepository(executor.session)
        self._grants = GrantRepository(executor.session)
        self._qrs = QRCodeRepository(executor.session)
        self._clock = clock

    # ------------------------------------------------------------------
    # Kits
    # ------------------------------------------------------------------

    async def create_kit(self, name: str, description: str | None = None) -> Kit:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Kit name is required")
        kit = await self._kits.create(name=name, description=description, is_active=True)
        await self._session.commit()
        logger.info("Admin %s created kit %s", self._admin_id, kit.id)
        return kit

    async def disable_kit(self, kit_id: str) -> Kit:
        """Soft-disable. Existing grants stay, but mint and consume stop honouring them."""
        if await self._kits.disable(kit_id) != 1:
            raise NotFoundError("Kit", kit_id)
        await self._session.commit()
        logger.info("Admin %s disabled kit %s", self._admin_id, kit_id)
        kit = await self._kits.get_by_id(kit_id)
        await self._session.refresh(kit)
        return kit

    async def add_kit_item(self, kit_id: str, content_type: str, content_id: str) -> KitItem:
        content_type = (content_type or "").strip().upper()
        content_id = (content_id or "").strip()
        if not content_type or not content_id:
            raise InvalidInputError("contentType and contentId are required")
        if await self._kits.get_by_id(kit_id) is None:
            raise NotFoundError("Kit", kit_id)
        if await self._items.has_member(kit_id, content_type, content_id):
            raise ConflictError("Content is already in this kit", code="DUPLICATE_ITEM")

        try:
            item = await self._items.create(
                kit_id=kit_id, content_type=content_type, content_id=content_id
            )
        except IntegrityError as exc:
            # A concurrent insert won the unique constraint
            raise ConflictError("Content is already in this kit", code="DUPLICATE_ITEM") from exc
        await self._session.commit()
        logger.info("Admin %s added %s/%s to kit %s", self._admin_id, content_type, content_id, kit_id)
        return item

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    async def grant_kit(self, qr_id: str, kit_id: str) -> QRKitGrant:
        """Entitle an active, bound QR to an active kit.

        The insert itself refuses to create a second active grant for the pair.
        """
        if not qr_id or not kit_id:
            raise InvalidInputError("qrId and kitId are required")

        qr = await self._qrs.get_by_id(qr_id)
        if qr is None or not qr.is_active or qr.bound_by_user_id is None:
            raise InvalidInputError("QR code must be active and bound")
        kit = await self._kits.get_by_id(kit_id)
        if kit is None or not kit.is_active:
            raise InvalidInputError("Kit must exist and be active")

        grant_id = await self._grants.insert_if_no_active(qr_id, kit_id, self._admin_id, self._clock())
        if grant_id is None:
            raise ConflictError("QR already holds an active grant for this kit", code="GRANT_EXISTS")

        await self._session.commit()
        logger.info("Admin %s granted kit %s to QR %s", self._admin_id, kit_id, qr_id)
        return await self._grants.get_by_id(grant_id)

    async def revoke_grant(
        self,
        *,
        grant_id: str | None = None,
        qr_id: str | None = None,
        kit_id: str | None = None,
    ) -> int:
        if not grant_id and not (qr_id and kit_id):
            raise InvalidInputError("Provide grantId or both qrId and kitId")

        affected = await self._grants.revoke_active(
            admin_id=self._admin_id,
            now=self._clock(),
            grant_id=grant_id,
            qr_id=qr_id,
            kit_id=kit_id,
        )
        if affected == 0:
            raise NotFoundError("Active grant", grant_id or f"{qr_id}/{kit_id}")
        await self._session.commit()
        logger.info(
            "Admin %s revoked grant %s", self._admin_id, grant_id or f"qr={qr_id} kit={kit_id}"
        )
        return affected

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_kits(
        self, pagination: PaginationParams, is_active: bool | None = None
    ) -> tuple[list[Kit], int]:
        return await self._kits.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"is_active": is_active},
        )

    async def kit_detail(self, kit_id: str) -> dict[str, Any]:
        kit = await self._kits.get_by_id(kit_id)
        if kit is None:
            raise NotFoundError("Kit", kit_id)
        return {
            "kit": kit,
            "items": await self._items.list_for_kit(kit_id),
            "grants": await self._grants.list_for_kit(kit_id),
        }
