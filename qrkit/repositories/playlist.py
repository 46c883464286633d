"""Playlist repositories — organization only, never consulted for access."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select, update

from qrkit.domain.content import Playlist, PlaylistItem
from qrkit.repositories.base import BaseRepository


class PlaylistRepository(BaseRepository[Playlist]):
    model = Playlist

    async def next_sort_index(self, kit_id: str) -> int:
        result = await self._session.execute(
            select(func.max(Playlist.sort_index))
            .where(Playlist.kit_id == kit_id)
            .where(Playlist.deleted_at.is_(None))
        )
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    async def list_for_kit(self, kit_id: str) -> list[Playlist]:
        result = await self._session.execute(
            self._base_query()
            .where(Playlist.kit_id == kit_id)
            .order_by(Playlist.sort_index.asc())
        )
        return list(result.scalars().all())

    async def update_live(self, playlist_id: str, **values: Any) -> int:
        result = await self._session.execute(
            update(Playlist)
            .where(Playlist.id == playlist_id)
            .where(Playlist.deleted_at.is_(None))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def soft_delete(self, playlist_id: str, now: datetime) -> int:
        return await self.update_live(playlist_id, deleted_at=now)


class PlaylistItemRepository(BaseRepository[PlaylistItem]):
    model = PlaylistItem

    async def next_sort_index(self, playlist_id: str) -> int:
        result = await self._session.execute(
            select(func.max(PlaylistItem.sort_index)).where(PlaylistItem.playlist_id == playlist_id)
        )
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    async def list_for_playlist(self, playlist_id: str, refresh: bool = False) -> list[PlaylistItem]:
        q = (
            select(PlaylistItem)
            .where(PlaylistItem.playlist_id == playlist_id)
            .order_by(PlaylistItem.sort_index.asc())
        )
        if refresh:
            # sort_index may have been changed by bulk UPDATEs in this session
            q = q.execution_options(populate_existing=True)
        result = await self._session.execute(q)
        return list(result.scalars().all())

    async def remove(self, playlist_id: str, content_id: str) -> int:
        result = await self._session.execute(
            delete(PlaylistItem)
            .where(PlaylistItem.playlist_id == playlist_id)
            .where(PlaylistItem.content_id == content_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def set_sort_index(self, playlist_id: str, content_id: str, sort_index: int) -> int:
        result = await self._session.execute(
            update(PlaylistItem)
            .where(PlaylistItem.playlist_id == playlist_id)
            .where(PlaylistItem.content_id == content_id)
            .values(sort_index=sort_index)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
