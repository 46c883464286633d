"""Playlist administration. Playlists order content inside a kit; they never grant access."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from qrkit.core.access import TrustedExecutor
from qrkit.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from qrkit.domain.content import Playlist, PlaylistItem
from qrkit.domain.mixins import utcnow
from qrkit.repositories.kit import KitRepository
from qrkit.repositories.playlist import PlaylistItemRepository, PlaylistRepository

logger = logging.getLogger(__name__)


class PlaylistAdminService:
    def __init__(self, executor: TrustedExecutor, clock: Callable[[], datetime] = utcnow):
        self._admin_id = executor.actor_id
        self._session = executor.session
        self._kits = KitRepository(executor.session)
        self._playlists = PlaylistRepository(executor.session)
        self._items = PlaylistItemRepository(executor.session)
        self._clock = clock

    async def _require_playlist(self, playlist_id: str) -> Playlist:
        playlist = await self._playlists.get_by_id(playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist", playlist_id)
        return playlist

    async def create(self, kit_id: str, name: str, description: str | None = None) -> Playlist:
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Playlist name is required")
        if await self._kits.get_by_id(kit_id) is None:
            raise NotFoundError("Kit", kit_id)

        playlist = await self._playlists.create(
            kit_id=kit_id,
            name=name,
            description=description,
            sort_index=await self._playlists.next_sort_index(kit_id),
        )
        await self._session.commit()
        logger.info("Admin %s created playlist %s in kit %s", self._admin_id, playlist.id, kit_id)
        return playlist

    async def update(
        self, playlist_id: str, *, name: str | None = None, description: str | None = None
    ) -> Playlist:
        values: dict[str, str | None] = {}
        if name is not None:
            if not name.strip():
                raise InvalidInputError("Playlist name cannot be blank")
            values["name"] = name.strip()
        if description is not None:
            values["description"] = description
        if not values:
            raise InvalidInputError("Nothing to update")

        if await self._playlists.update_live(playlist_id, **values) != 1:
            raise NotFoundError("Playlist", playlist_id)
        await self._session.commit()
        playlist = await self._require_playlist(playlist_id)
        await self._session.refresh(playlist)
        return playlist

    async def delete(self, playlist_id: str) -> None:
        if await self._playlists.soft_delete(playlist_id, self._clock()) != 1:
            raise NotFoundError("Playlist", playlist_id)
        await self._session.commit()
        logger.info("Admin %s deleted playlist %s", self._admin_id, playlist_id)

    async def add_content(self, playlist_id: str, content_id: str) -> PlaylistItem:
        content_id = (content_id or "").strip()
        if not content_id:
            raise InvalidInputError("contentId is required")
        await self._require_playlist(playlist_id)

        existing = await self._items.list_for_playlist(playlist_id)
        if any(item.content_id == content_id for item in existing):
            raise ConflictError("Content is already in this playlist", code="DUPLICATE_ITEM")

        item = await self._items.create(
            playlist_id=playlist_id,
            content_id=content_id,
            sort_index=await self._items.next_sort_index(playlist_id),
        )
        await self._session.commit()
        return item

    async def remove_content(self, playlist_id: str, content_id: str) -> None:
        await self._require_playlist(playlist_id)
        if await self._items.remove(playlist_id, content_id) == 0:
            raise NotFoundError("Playlist item", content_id)
        await self._session.commit()

    async def reorder(self, playlist_id: str, content_ids: Sequence[str]) -> list[PlaylistItem]:
        """Assign sort indexes 0..n-1 in the given order.

        The list must name every item of the playlist exactly once.
        """
        await self._require_playlist(playlist_id)
        current = {item.content_id for item in await self._items.list_for_playlist(playlist_id)}
        if len(set(content_ids)) != len(content_ids) or set(content_ids) != current:
            raise InvalidInputError("contentIds must list every playlist item exactly once")

        for index, content_id in enumerate(content_ids):
            await self._items.set_sort_index(playlist_id, content_id, index)
        await self._session.commit()
        return await self._items.list_for_playlist(playlist_id, refresh=True)

    async def list_for_kit(self, kit_id: str) -> list[Playlist]:
        if await self._kits.get_by_id(kit_id) is None:
            raise NotFoundError("Kit", kit_id)
        return await self._playlists.list_for_kit(kit_id)

    async def list_items(self, playlist_id: str) -> list[PlaylistItem]:
        await self._require_playlist(playlist_id)
        return await self._items.list_for_playlist(playlist_id)
