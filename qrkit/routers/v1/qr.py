"""QR bind / verify for the signed-in user."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from qrkit.core.access import ScopedAccess, get_scoped_access
from qrkit.core.response import SuccessResponse
from qrkit.schemas.qr import CodeRequest, QROut, VerifyResponse
from qrkit.services.binding import BindingService

router = APIRouter(prefix="/qr", tags=["QR"])


@router.post("/bind", response_model=SuccessResponse)
async def bind_qr(
    body: CodeRequest,
    scope: ScopedAccess = Depends(get_scoped_access),
):
    """Claim an unbound QR code. Unknown and already-claimed codes both report ALREADY_BOUND."""
    await BindingService(scope).bind(body.code)
    return {"success": True}


@router.post("/verify", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify_qr(
    body: CodeRequest,
    scope: ScopedAccess = Depends(get_scoped_access),
):
    result = await BindingService(scope).verify(body.code)
    return VerifyResponse(
        success=result.error is None,
        belongs_to_user=result.belongs_to_user,
        is_bound=result.is_bound,
        error=result.error,
        qr=QROut.model_validate(result.qr_code) if result.qr_code is not None else None,
    )
