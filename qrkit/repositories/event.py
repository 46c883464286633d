from sqlalchemy import select

from qrkit.domain.qr import QREvent
from qrkit.repositories.base import BaseRepository


class QREventRepository(BaseRepository[QREvent]):
    """Append-only: exposes inserts and reads, never updates or deletes."""

    model = QREvent

    async def list_for_affected_user(self, user_id: str) -> list[QREvent]:
        result = await self._session.execute(
            select(QREvent)
            .where(QREvent.affected_user_id == user_id)
            .order_by(QREvent.created_at.desc())
        )
        return list(result.scalars().all())
