"""Admin playlist organization."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from qrkit.core.access import TrustedExecutor, get_admin_executor
from qrkit.core.response import DataResponse, ItemsResponse, SuccessResponse
from qrkit.schemas.playlists import (
    PlaylistCreate,
    PlaylistItemCreate,
    PlaylistItemOut,
    PlaylistOut,
    PlaylistUpdate,
    ReorderRequest,
)
from qrkit.services.playlists import PlaylistAdminService

router = APIRouter(prefix="/admin", tags=["Admin: Playlists"])


@router.post(
    "/kits/{kit_id}/playlists",
    response_model=DataResponse[PlaylistOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_playlist(
    kit_id: str,
    body: PlaylistCreate,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    playlist = await PlaylistAdminService(executor).create(kit_id, body.name, body.description)
    return {"data": PlaylistOut.model_validate(playlist)}


@router.get("/kits/{kit_id}/playlists", response_model=ItemsResponse[PlaylistOut])
async def list_playlists(
    kit_id: str,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    items = await PlaylistAdminService(executor).list_for_kit(kit_id)
    return {"data": [PlaylistOut.model_validate(p) for p in items]}


@router.patch("/playlists/{playlist_id}", response_model=DataResponse[PlaylistOut])
async def update_playlist(
    playlist_id: str,
    body: PlaylistUpdate,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    playlist = await PlaylistAdminService(executor).update(
        playlist_id, name=body.name, description=body.description
    )
    return {"data": PlaylistOut.model_validate(playlist)}


@router.delete("/playlists/{playlist_id}", response_model=SuccessResponse)
async def delete_playlist(
    playlist_id: str,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    await PlaylistAdminService(executor).delete(playlist_id)
    return {"success": True}


@router.get("/playlists/{playlist_id}/items", response_model=ItemsResponse[PlaylistItemOut])
async def list_playlist_items(
    playlist_id: str,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    items = await PlaylistAdminService(executor).list_items(playlist_id)
    return {"data": [PlaylistItemOut.model_validate(i) for i in items]}


@router.post(
    "/playlists/{playlist_id}/items",
    response_model=DataResponse[PlaylistItemOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_playlist_item(
    playlist_id: str,
    body: PlaylistItemCreate,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    item = await PlaylistAdminService(executor).add_content(playlist_id, body.content_id)
    return {"data": PlaylistItemOut.model_validate(item)}


@router.delete("/playlists/{playlist_id}/items", response_model=SuccessResponse)
async def remove_playlist_item(
    playlist_id: str,
    content_id: str = Query(..., alias="contentId"),
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    await PlaylistAdminService(executor).remove_content(playlist_id, content_id)
    return {"success": True}


@router.post("/playlists/{playlist_id}/items/reorder", response_model=ItemsResponse[PlaylistItemOut])
async def reorder_playlist(
    playlist_id: str,
    body: ReorderRequest,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    items = await PlaylistAdminService(executor).reorder(playlist_id, body.content_ids)
    return {"data": [PlaylistItemOut.model_validate(i) for i in items]}
