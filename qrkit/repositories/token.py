"""Access token repository — insert and single-shot consumption."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update

from qrkit.domain.kit import Kit, QRKitGrant
from qrkit.domain.qr import QRCode
from qrkit.domain.token import AccessToken
from qrkit.repositories.base import BaseRepository


class AccessTokenRepository(BaseRepository[AccessToken]):
    model = AccessToken

    async def consume(self, token_hash: str, now: datetime) -> int:
        """Mark a token used in one conditional UPDATE.

        The row matches only while it is unused and unexpired, its QR is
        still active, and an active grant for (qr, kit) on an active kit
        still exists. Returns the affected row count (0 or 1).
        """
        qr_active = (
            select(QRCode.id)
            .where(QRCode.id == AccessToken.qr_id)
            .where(QRCode.is_active.is_(True))
            .exists()
        )
        grant_active = (
            select(QRKitGrant.id)
            .join(Kit, Kit.id == QRKitGrant.kit_id)
            .where(QRKitGrant.qr_id == AccessToken.qr_id)
            .where(QRKitGrant.kit_id == AccessToken.kit_id)
            .where(QRKitGrant.revoked_at.is_(None))
            .where(Kit.is_active.is_(True))
            .exists()
        )
        result = await self._session.execute(
            update(AccessToken)
            .where(AccessToken.token_hash == token_hash)
            .where(AccessToken.used_at.is_(None))
            .where(AccessToken.expires_at > now)
            .where(qr_active)
            .where(grant_active)
            .values(used_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def find_consumed(self, token_hash: str) -> AccessToken | None:
        result = await self._session.execute(
            select(AccessToken)
            .where(AccessToken.token_hash == token_hash)
            .where(AccessToken.used_at.is_not(None))
            # The row may already sit in the identity map from before the UPDATE
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()
