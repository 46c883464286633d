"""Content delivery. Authenticated by a single-use access token, not a session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from qrkit.core.access import ScopedAccess, TrustedExecutor, get_scoped_access, get_token_gate_executor
from qrkit.core.exceptions import InvalidInputError
from qrkit.core.response import DataResponse, ItemsResponse
from qrkit.schemas.content import ContentAccessOut, ContentBatchRequest, ContentOut
from qrkit.services.content_gate import ContentAccessGate
from qrkit.services.library import LibraryService
from qrkit.services.storage import CloudinaryStorage, get_storage

router = APIRouter(prefix="/content", tags=["Content"])


@router.post("/batch", response_model=ItemsResponse[ContentOut])
async def content_batch(
    body: ContentBatchRequest,
    scope: ScopedAccess = Depends(get_scoped_access),
):
    """Metadata for the requested ids that belong to the caller's kits."""
    items = await LibraryService(scope).content_batch(body.content_ids)
    return {"data": [ContentOut.model_validate(c) for c in items]}


@router.get("/{content_type}/{content_id:path}", response_model=DataResponse[ContentAccessOut])
async def get_content(
    content_type: str,
    content_id: str,
    token: str | None = Query(default=None, description="Single-use access token"),
    executor: TrustedExecutor = Depends(get_token_gate_executor),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Spend `token` and return a signed delivery URL for the content.

    The token is consumed before any other check and stays spent even
    when access is then denied.
    """
    if not token:
        raise InvalidInputError("An access token is required", code="TOKEN_REQUIRED")
    access = await ContentAccessGate(executor, storage).grant_content_access(
        token, content_type, content_id
    )
    return {"data": ContentAccessOut.model_validate(access)}
