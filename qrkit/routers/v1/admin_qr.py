"""Admin QR lifecycle: generate, revoke, reassign, audit views.

Every route resolves `get_admin_executor`, which authenticates (401) and
checks the admin role (403) before any service call.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from qrkit.core.access import TrustedExecutor, get_admin_executor
from qrkit.core.pagination import PaginationParams
from qrkit.core.response import DataResponse, ItemsResponse, ListResponse, paginated
from qrkit.schemas.kits import GrantOut
from qrkit.schemas.qr import (
    GenerateQRRequest,
    QREventOut,
    QROut,
    ReassignOut,
    ReassignQRRequest,
    RevokeQRRequest,
)
from qrkit.services.admin_qr import QRAdminService

router = APIRouter(prefix="/admin/qr", tags=["Admin: QR"])


@router.post("/generate", response_model=ItemsResponse[QROut], status_code=status.HTTP_201_CREATED)
async def generate_qr(
    body: GenerateQRRequest,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    created = await QRAdminService(executor).generate(body.count, body.metadata)
    return {"data": [QROut.model_validate(q) for q in created]}


@router.post("/revoke", response_model=DataResponse[QROut])
async def revoke_qr(
    body: RevokeQRRequest,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    qr = await QRAdminService(executor).revoke(body.qr_id)
    return {"data": QROut.model_validate(qr)}


@router.post("/reassign", response_model=DataResponse[ReassignOut], status_code=status.HTTP_201_CREATED)
async def reassign_qr(
    body: ReassignQRRequest,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    """Issue a brand-new QR pre-bound to the user; optionally revoke an old one first."""
    qr = await QRAdminService(executor).reassign(
        body.user_id,
        metadata=body.metadata,
        revoke_old_qr=body.revoke_old_qr,
        old_qr_id=body.old_qr_id,
    )
    return {"data": ReassignOut(new_qr_id=qr.id, qr=QROut.model_validate(qr))}


@router.get("", response_model=ListResponse[QROut])
async def list_qr(
    bound_by_user_id: Optional[str] = Query(default=None, alias="boundByUserId"),
    pagination: PaginationParams = Depends(),
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    items, total = await QRAdminService(executor).list_qrs(pagination, bound_by_user_id)
    return paginated(
        [QROut.model_validate(q) for q in items],
        total, pagination.page, pagination.limit,
    )


@router.get("/events", response_model=ListResponse[QREventOut])
async def list_qr_events(
    qr_id: Optional[str] = Query(default=None, alias="qrId"),
    pagination: PaginationParams = Depends(),
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    items, total = await QRAdminService(executor).list_events(pagination, qr_id)
    return paginated(
        [QREventOut.model_validate(e) for e in items],
        total, pagination.page, pagination.limit,
    )


@router.get("/{qr_id}/grants", response_model=ItemsResponse[GrantOut])
async def qr_grants(
    qr_id: str,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    grants = await QRAdminService(executor).grants_for_qr(qr_id)
    return {"data": [GrantOut.model_validate(g) for g in grants]}
