"""Admin QR lifecycle: generate, revoke, reassign, and audit views.

QR identity is permanent once created: revoke only clears `is_active`,
and reassignment always issues a brand-new code instead of rebinding.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from qrkit.core.access import TrustedExecutor
from qrkit.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from qrkit.core.pagination import PaginationParams
from qrkit.domain.kit import QRKitGrant
from qrkit.domain.mixins import utcnow
from qrkit.domain.qr import (
    QR_EVENT_GENERATED,
    QR_EVENT_REASSIGNED,
    QR_EVENT_REVOKED,
    QRCode,
    QREvent,
)
from qrkit.repositories.event import QREventRepository
from qrkit.repositories.grant import GrantRepository
from qrkit.repositories.qr import QRCodeRepository
from qrkit.repositories.user import UserRepository
from qrkit.services.audit import AuditSink
from qrkit.services.validation import validate_metadata

logger = logging.getLogger(__name__)

MAX_GENERATE_BATCH = 100


def new_code() -> str:
    return str(uuid.uuid4())


class QRAdminService:
    def __init__(self, executor: TrustedExecutor, clock: Callable[[], datetime] = utcnow):
        self._admin_id = executor.actor_id
        self._session = executor.session
        self._qrs = QRCodeRepository(executor.session)
        self._users = UserRepository(executor.session)
        self._events = QREventRepository(executor.session)
        self._grants = GrantRepository(executor.session)
        self._audit = AuditSink(executor)
        self._clock = clock

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def generate(self, count: int, metadata: dict[str, Any] | None = None) -> list[QRCode]:
        """Issue `count` unbound codes, one GENERATED event each."""
        if count < 1 or count > MAX_GENERATE_BATCH:
            raise InvalidInputError(f"count must be between 1 and {MAX_GENERATE_BATCH}")
        meta = validate_metadata(metadata)

        created: list[QRCode] = []
        for _ in range(count):
            qr = await self._qrs.create_unbound(new_code(), meta)
            await self._audit.log_qr_event(
                qr_id=qr.id,
                admin_id=self._admin_id,
                affected_user_id=None,
                action=QR_EVENT_GENERATED,
            )
            created.append(qr)
        await self._session.commit()
        logger.info("Admin %s generated %d QR codes", self._admin_id, count)
        return created

    async def revoke(self, qr_id: str) -> QRCode:
        """Soft-revoke a bound, active QR and record REVOKED for the previous owner."""
        qr = await self._revoke(qr_id)
        await self._session.commit()
        await self._session.refresh(qr)
        return qr

    async def _revoke(self, qr_id: str) -> QRCode:
        qr = await self._qrs.get_by_id(qr_id)
        if qr is None:
            raise NotFoundError("QR code", qr_id)
        if qr.bound_by_user_id is None:
            raise InvalidInputError("QR code is not bound", code="NOT_BOUND")
        if not qr.is_active:
            raise ConflictError("QR code is already revoked", code="ALREADY_REVOKED")

        affected = await self._qrs.revoke_if_active(qr_id, self._admin_id, self._clock())
        if affected != 1:
            # Lost a race with a concurrent revoke
            raise ConflictError("QR code is already revoked", code="ALREADY_REVOKED")

        await self._audit.log_qr_event(
            qr_id=qr_id,
            admin_id=self._admin_id,
            affected_user_id=qr.bound_by_user_id,
            action=QR_EVENT_REVOKED,
        )
        logger.info("Admin %s revoked QR %s", self._admin_id, qr_id)
        return qr

    async def reassign(
        self,
        user_id: str,
        *,
        metadata: dict[str, Any] | None = None,
        revoke_old_qr: bool = False,
        old_qr_id: str | None = None,
    ) -> QRCode:
        """Create a new QR pre-bound to `user_id`, optionally revoking an old one first.

        A failed revoke of the old QR is logged and does not stop reassignment.
        """
        meta = validate_metadata(metadata)
        if await self._users.get_by_id(user_id) is None:
            raise NotFoundError("User", user_id, code="USER_NOT_FOUND")

        revoked_old = False
        if revoke_old_qr and old_qr_id:
            try:
                await self._revoke(old_qr_id)
                revoked_old = True
            except (NotFoundError, InvalidInputError, ConflictError) as exc:
                logger.warning("Reassign: old QR %s not revoked (%s)", old_qr_id, exc.code)

        qr = await self._qrs.create_bound(new_code(), user_id, self._clock(), meta)
        await self._audit.log_qr_event(
            qr_id=qr.id,
            admin_id=self._admin_id,
            affected_user_id=user_id,
            action=QR_EVENT_GENERATED,
        )
        details: dict[str, Any] = {"new_qr_id": qr.id}
        if revoke_old_qr and old_qr_id:
            details["old_qr_id"] = old_qr_id
            details["old_qr_revoked"] = revoked_old
        await self._audit.log_qr_event(
            qr_id=qr.id,
            admin_id=self._admin_id,
            affected_user_id=user_id,
            action=QR_EVENT_REASSIGNED,
            details=details,
        )
        await self._session.commit()
        logger.info("Admin %s reassigned user %s to QR %s", self._admin_id, user_id, qr.id)
        return qr

    # ------------------------------------------------------------------
    # Reads (errors propagate; empty means no rows)
    # ------------------------------------------------------------------

    async def list_qrs(
        self, pagination: PaginationParams, bound_by_user_id: str | None = None
    ) -> tuple[list[QRCode], int]:
        return await self._qrs.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"bound_by_user_id": bound_by_user_id},
        )

    async def list_events(
        self, pagination: PaginationParams, qr_id: str | None = None
    ) -> tuple[list[QREvent], int]:
        return await self._events.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"qr_id": qr_id},
        )

    async def grants_for_qr(self, qr_id: str) -> list[QRKitGrant]:
        if await self._qrs.get_by_id(qr_id) is None:
            raise NotFoundError("QR code", qr_id)
        return await self._grants.list_for_qr(qr_id)
