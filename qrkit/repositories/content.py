from collections.abc import Sequence

from sqlalchemy import select

from qrkit.domain.content import Content
from qrkit.repositories.base import BaseRepository


class ContentRepository(BaseRepository[Content]):
    model = Content

    async def list_by_ids(self, content_ids: Sequence[str]) -> list[Content]:
        if not content_ids:
            return []
        result = await self._session.execute(
            select(Content).where(Content.id.in_(content_ids)).order_by(Content.created_at)
        )
        return list(result.scalars().all())
