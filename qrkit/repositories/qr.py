"""QR code repository — conditional updates for bind and revoke.

Both transitions are expressed as a single `UPDATE ... WHERE <precondition>`;
callers infer success from the affected row count only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update

from qrkit.domain.qr import QRCode
from qrkit.repositories.base import BaseRepository


class QRCodeRepository(BaseRepository[QRCode]):
    model = QRCode

    # ------------------------------------------------------------------
    # Atomic transitions
    # ------------------------------------------------------------------

    async def bind_if_unbound(self, code: str, user_id: str, now: datetime) -> int:
        """Claim an unbound code for `user_id`. Returns the affected row count (0 or 1).

        No SELECT precedes the update, so a missing code and an already bound
        code are indistinguishable to the caller.
        """
        result = await self._session.execute(
            update(QRCode)
            .where(QRCode.code == code)
            .where(QRCode.bound_by_user_id.is_(None))
            .values(bound_by_user_id=user_id, bound_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def revoke_if_active(self, qr_id: str, admin_id: str, now: datetime) -> int:
        """Soft-revoke a bound, active QR. Binding columns are never touched."""
        result = await self._session.execute(
            update(QRCode)
            .where(QRCode.id == qr_id)
            .where(QRCode.bound_by_user_id.is_not(None))
            .where(QRCode.is_active.is_(True))
            .values(is_active=False, revoked_at=now, revoked_by_admin_id=admin_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # ------------------------------------------------------------------
    # Owner-scoped reads
    # ------------------------------------------------------------------

    async def find_owned_by_code(self, code: str, owner_id: str) -> QRCode | None:
        """Visibility-restricted lookup: only rows bound to `owner_id` are returned."""
        result = await self._session.execute(
            select(QRCode)
            .where(QRCode.code == code)
            .where(QRCode.bound_by_user_id == owner_id)
        )
        return result.scalars().first()

    async def active_ids_for_user(self, user_id: str) -> list[str]:
        result = await self._session.execute(
            select(QRCode.id)
            .where(QRCode.bound_by_user_id == user_id)
            .where(QRCode.is_active.is_(True))
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> list[QRCode]:
        result = await self._session.execute(
            select(QRCode)
            .where(QRCode.bound_by_user_id == user_id)
            .order_by(QRCode.created_at.desc())
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Inserts
    # ------------------------------------------------------------------

    async def create_unbound(self, code: str, meta: dict[str, Any] | None) -> QRCode:
        return await self.create(code=code, meta=meta, is_active=True)

    async def create_bound(
        self, code: str, user_id: str, now: datetime, meta: dict[str, Any] | None
    ) -> QRCode:
        return await self.create(
            code=code,
            bound_by_user_id=user_id,
            bound_at=now,
            is_active=True,
            meta=meta,
        )
