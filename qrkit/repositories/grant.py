"""QR-to-kit grant repository.

At most one active grant per (qr_id, kit_id) is guaranteed by inserting
through `INSERT ... SELECT ... WHERE NOT EXISTS (active grant)`, with a
partial unique index as the storage-level backstop.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, insert, literal, select, update

from qrkit.domain.kit import Kit, QRKitGrant
from qrkit.domain.mixins import new_uuid
from qrkit.domain.qr import QRCode
from qrkit.repositories.base import BaseRepository


class GrantRepository(BaseRepository[QRKitGrant]):
    model = QRKitGrant
    default_order = "granted_at"

    def _active(self):
        return select(QRKitGrant).where(QRKitGrant.revoked_at.is_(None))

    async def find_active_for_user(self, user_id: str, kit_id: str | None = None) -> QRKitGrant | None:
        """Return an active grant held by any of the user's active QRs (optionally for one kit).

        The grant's kit must still be active.
        """
        q = (
            self._active()
            .join(QRCode, QRCode.id == QRKitGrant.qr_id)
            .join(Kit, Kit.id == QRKitGrant.kit_id)
            .where(QRCode.bound_by_user_id == user_id)
            .where(QRCode.is_active.is_(True))
            .where(Kit.is_active.is_(True))
        )
        if kit_id is not None:
            q = q.where(QRKitGrant.kit_id == kit_id)
        result = await self._session.execute(q.order_by(QRKitGrant.granted_at.asc()).limit(1))
        return result.scalars().first()

    async def active_kit_ids(self, qr_id: str) -> list[str]:
        result = await self._session.execute(
            select(QRKitGrant.kit_id)
            .where(QRKitGrant.qr_id == qr_id)
            .where(QRKitGrant.revoked_at.is_(None))
        )
        return list(result.scalars().all())

    async def list_for_qr(self, qr_id: str) -> list[QRKitGrant]:
        result = await self._session.execute(
            select(QRKitGrant)
            .where(QRKitGrant.qr_id == qr_id)
            .order_by(QRKitGrant.granted_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_kit(self, kit_id: str) -> list[QRKitGrant]:
        result = await self._session.execute(
            select(QRKitGrant)
            .where(QRKitGrant.kit_id == kit_id)
            .order_by(QRKitGrant.granted_at.desc())
        )
        return list(result.scalars().all())

    async def insert_if_no_active(
        self, qr_id: str, kit_id: str, admin_id: str | None, now: datetime
    ) -> str | None:
        """Insert a grant unless an active one exists. Returns the new id, or None."""
        grant_id = new_uuid()
        already_active = (
            select(QRKitGrant.id)
            .where(QRKitGrant.qr_id == qr_id)
            .where(QRKitGrant.kit_id == kit_id)
            .where(QRKitGrant.revoked_at.is_(None))
            .exists()
        )
        source = select(
            literal(grant_id, String(36)),
            literal(qr_id, String(36)),
            literal(kit_id, String(36)),
            literal(admin_id, String(36)),
            literal(now, DateTime(timezone=True)),
        ).where(~already_active)
        result = await self._session.execute(
            insert(QRKitGrant.__table__).from_select(
                ["id", "qr_id", "kit_id", "granted_by_admin_id", "granted_at"], source
            )
        )
        return grant_id if result.rowcount == 1 else None

    async def revoke_active(
        self,
        *,
        admin_id: str | None,
        now: datetime,
        grant_id: str | None = None,
        qr_id: str | None = None,
        kit_id: str | None = None,
    ) -> int:
        """Revoke by grant id or by (qr_id, kit_id); only currently active grants match."""
        stmt = update(QRKitGrant).where(QRKitGrant.revoked_at.is_(None))
        if grant_id is not None:
            stmt = stmt.where(QRKitGrant.id == grant_id)
        else:
            stmt = stmt.where(QRKitGrant.qr_id == qr_id).where(QRKitGrant.kit_id == kit_id)
        result = await self._session.execute(
            stmt.values(revoked_at=now, revoked_by_admin_id=admin_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
