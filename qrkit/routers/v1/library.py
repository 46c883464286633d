"""The signed-in user's own QR codes, events, kits and playlists."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from qrkit.core.access import ScopedAccess, get_scoped_access
from qrkit.core.response import ItemsResponse
from qrkit.schemas.kits import KitOut
from qrkit.schemas.playlists import PlaylistItemOut, PlaylistOut
from qrkit.schemas.qr import QREventOut, QROut
from qrkit.services.library import LibraryService

router = APIRouter(tags=["Library"])


@router.get("/me/qr", response_model=ItemsResponse[QROut])
async def my_qr(scope: ScopedAccess = Depends(get_scoped_access)):
    items = await LibraryService(scope).my_qrs()
    return {"data": [QROut.model_validate(q) for q in items]}


@router.get("/me/events", response_model=ItemsResponse[QREventOut])
async def my_events(scope: ScopedAccess = Depends(get_scoped_access)):
    items = await LibraryService(scope).my_events()
    return {"data": [QREventOut.model_validate(e) for e in items]}


@router.get("/me/kits", response_model=ItemsResponse[KitOut])
async def my_kits(scope: ScopedAccess = Depends(get_scoped_access)):
    """Active kits reachable through the caller's active QR codes and grants."""
    items = await LibraryService(scope).my_kits()
    return {"data": [KitOut.model_validate(k) for k in items]}


@router.get("/kits/{kit_id}/playlists", response_model=ItemsResponse[PlaylistOut])
async def kit_playlists(kit_id: str, scope: ScopedAccess = Depends(get_scoped_access)):
    items = await LibraryService(scope).kit_playlists(kit_id)
    return {"data": [PlaylistOut.model_validate(p) for p in items]}


@router.get("/playlists/{playlist_id}/items", response_model=ItemsResponse[PlaylistItemOut])
async def playlist_items(playlist_id: str, scope: ScopedAccess = Depends(get_scoped_access)):
    items = await LibraryService(scope).playlist_items(playlist_id)
    return {"data": [PlaylistItemOut.model_validate(i) for i in items]}
