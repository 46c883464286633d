"""Kit and kit-membership repositories."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select, update

from qrkit.domain.kit import Kit, KitItem
from qrkit.repositories.base import BaseRepository


class KitRepository(BaseRepository[Kit]):
    model = Kit

    async def disable(self, kit_id: str) -> int:
        """Soft-disable a kit. Does not cascade to grants or outstanding tokens."""
        result = await self._session.execute(
            update(Kit)
            .where(Kit.id == kit_id)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def list_active_by_ids(self, kit_ids: Sequence[str]) -> list[Kit]:
        if not kit_ids:
            return []
        result = await self._session.execute(
            select(Kit)
            .where(Kit.id.in_(kit_ids))
            .where(Kit.is_active.is_(True))
            .order_by(Kit.name)
        )
        return list(result.scalars().all())


class KitItemRepository(BaseRepository[KitItem]):
    model = KitItem

    async def has_member(self, kit_id: str, content_type: str, content_id: str) -> bool:
        result = await self._session.execute(
            select(KitItem.id)
            .where(KitItem.kit_id == kit_id)
            .where(KitItem.content_type == content_type)
            .where(KitItem.content_id == content_id)
            .limit(1)
        )
        return result.first() is not None

    async def list_for_kit(self, kit_id: str) -> list[KitItem]:
        result = await self._session.execute(
            select(KitItem)
            .where(KitItem.kit_id == kit_id)
            .order_by(KitItem.created_at.desc())
        )
        return list(result.scalars().all())

    async def content_ids_for_kits(self, kit_ids: Sequence[str]) -> set[str]:
        if not kit_ids:
            return set()
        result = await self._session.execute(
            select(KitItem.content_id).where(KitItem.kit_id.in_(kit_ids))
        )
        return set(result.scalars().all())
