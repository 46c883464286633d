"""Access token mint."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from qrkit.core.access import ScopedAccess, get_scoped_access
from qrkit.core.response import DataResponse
from qrkit.schemas.tokens import MintedTokenOut, MintRequest
from qrkit.services.tokens import TokenMintService

router = APIRouter(prefix="/tokens", tags=["Tokens"])


@router.post("", response_model=DataResponse[MintedTokenOut], status_code=status.HTTP_201_CREATED)
async def mint_token(
    body: MintRequest | None = Body(default=None),
    scope: ScopedAccess = Depends(get_scoped_access),
):
    """Mint a single-use access token, optionally scoped to one kit.

    NO_ACTIVE_QR / NO_ACTIVE_GRANT come back as 200 with `success: false`.
    """
    svc = TokenMintService(scope)
    if body is not None and body.kit_id:
        minted = await svc.mint_for_kit(body.kit_id)
    else:
        minted = await svc.mint()
    return {"data": MintedTokenOut.model_validate(minted)}
