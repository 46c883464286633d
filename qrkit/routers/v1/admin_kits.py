"""Admin kit, kit item and grant management."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from qrkit.core.access import TrustedExecutor, get_admin_executor
from qrkit.core.pagination import PaginationParams
from qrkit.core.response import DataResponse, ListResponse, SuccessResponse, paginated
from qrkit.schemas.kits import (
    GrantOut,
    GrantRequest,
    KitCreate,
    KitDetailOut,
    KitItemCreate,
    KitItemOut,
    KitOut,
    KitRef,
    RevokeGrantRequest,
)
from qrkit.services.entitlements import KitAdminService

router = APIRouter(prefix="/admin/kits", tags=["Admin: Kits"])


@router.post("", response_model=DataResponse[KitOut], status_code=status.HTTP_201_CREATED)
async def create_kit(
    body: KitCreate,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    kit = await KitAdminService(executor).create_kit(body.name, body.description)
    return {"data": KitOut.model_validate(kit)}


@router.post("/disable", response_model=DataResponse[KitOut])
async def disable_kit(
    body: KitRef,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    """Soft-disable a kit. Grants are kept; mint and consume stop honouring them."""
    kit = await KitAdminService(executor).disable_kit(body.kit_id)
    return {"data": KitOut.model_validate(kit)}


@router.post("/items", response_model=DataResponse[KitItemOut], status_code=status.HTTP_201_CREATED)
async def add_kit_item(
    body: KitItemCreate,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    item = await KitAdminService(executor).add_kit_item(body.kit_id, body.content_type, body.content_id)
    return {"data": KitItemOut.model_validate(item)}


@router.post("/grant", response_model=DataResponse[GrantOut], status_code=status.HTTP_201_CREATED)
async def grant_kit(
    body: GrantRequest,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    grant = await KitAdminService(executor).grant_kit(body.qr_id, body.kit_id)
    return {"data": GrantOut.model_validate(grant)}


@router.post("/revoke-grant", response_model=SuccessResponse)
async def revoke_grant(
    body: RevokeGrantRequest,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    await KitAdminService(executor).revoke_grant(
        grant_id=body.grant_id, qr_id=body.qr_id, kit_id=body.kit_id
    )
    return {"success": True}


@router.get("", response_model=ListResponse[KitOut])
async def list_kits(
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    pagination: PaginationParams = Depends(),
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    items, total = await KitAdminService(executor).list_kits(pagination, is_active)
    return paginated(
        [KitOut.model_validate(k) for k in items],
        total, pagination.page, pagination.limit,
    )


@router.get("/{kit_id}", response_model=DataResponse[KitDetailOut])
async def get_kit(
    kit_id: str,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    detail = await KitAdminService(executor).kit_detail(kit_id)
    return {
        "data": KitDetailOut(
            kit=KitOut.model_validate(detail["kit"]),
            items=[KitItemOut.model_validate(i) for i in detail["items"]],
            grants=[GrantOut.model_validate(g) for g in detail["grants"]],
        )
    }
