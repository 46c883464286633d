"""Read-only views for the signed-in user.

Every query here is scoped to the caller: their own QR codes, events where
they are the affected user, and kits reachable through their active QRs.
"""

from __future__ import annotations

from collections.abc import Sequence

from qrkit.core.access import ScopedAccess
from qrkit.core.exceptions import ForbiddenError
from qrkit.domain.content import Content, Playlist, PlaylistItem
from qrkit.domain.kit import Kit
from qrkit.domain.qr import QRCode, QREvent
from qrkit.repositories.content import ContentRepository
from qrkit.repositories.event import QREventRepository
from qrkit.repositories.grant import GrantRepository
from qrkit.repositories.kit import KitItemRepository, KitRepository
from qrkit.repositories.playlist import PlaylistItemRepository, PlaylistRepository
from qrkit.repositories.qr import QRCodeRepository

MAX_BATCH = 100


class LibraryService:
    def __init__(self, scope: ScopedAccess):
        self._user_id = scope.user_id
        self._qrs = QRCodeRepository(scope.session)
        self._events = QREventRepository(scope.session)
        self._grants = GrantRepository(scope.session)
        self._kits = KitRepository(scope.session)
        self._kit_items = KitItemRepository(scope.session)
        self._contents = ContentRepository(scope.session)
        self._playlists = PlaylistRepository(scope.session)
        self._playlist_items = PlaylistItemRepository(scope.session)

    async def my_qrs(self) -> list[QRCode]:
        return await self._qrs.list_for_user(self._user_id)

    async def my_events(self) -> list[QREvent]:
        return await self._events.list_for_affected_user(self._user_id)

    async def _entitled_kit_ids(self) -> list[str]:
        kit_ids: set[str] = set()
        for qr_id in await self._qrs.active_ids_for_user(self._user_id):
            kit_ids.update(await self._grants.active_kit_ids(qr_id))
        return sorted(kit_ids)

    async def my_kits(self) -> list[Kit]:
        return await self._kits.list_active_by_ids(await self._entitled_kit_ids())

    async def _require_entitled(self, kit_id: str) -> None:
        entitled = {kit.id for kit in await self.my_kits()}
        if kit_id not in entitled:
            raise ForbiddenError("No active grant for this kit", code="ACCESS_DENIED")

    async def kit_playlists(self, kit_id: str) -> list[Playlist]:
        await self._require_entitled(kit_id)
        return await self._playlists.list_for_kit(kit_id)

    async def playlist_items(self, playlist_id: str) -> list[PlaylistItem]:
        playlist = await self._playlists.get_by_id(playlist_id)
        # Same answer for a missing playlist and one outside the caller's kits
        if playlist is None:
            raise ForbiddenError("No active grant for this kit", code="ACCESS_DENIED")
        await self._require_entitled(playlist.kit_id)
        return await self._playlist_items.list_for_playlist(playlist_id)

    async def content_batch(self, content_ids: Sequence[str]) -> list[Content]:
        """Metadata for the requested ids that belong to the caller's kits; others are omitted."""
        requested = list(dict.fromkeys(content_ids))[:MAX_BATCH]
        if not requested:
            return []
        kit_ids = [kit.id for kit in await self.my_kits()]
        allowed = await self._kit_items.content_ids_for_kits(kit_ids)
        return await self._contents.list_by_ids([cid for cid in requested if cid in allowed])
