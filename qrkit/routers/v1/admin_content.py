"""Admin content metadata and uploads."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from qrkit.core.access import TrustedExecutor, get_admin_executor
from qrkit.core.config import settings
from qrkit.core.exceptions import AppException, InvalidInputError
from qrkit.core.pagination import PaginationParams
from qrkit.core.response import DataResponse, ListResponse, paginated
from qrkit.schemas.content import ContentCreate, ContentOut
from qrkit.services.contents import ContentAdminService
from qrkit.services.storage import CloudinaryStorage, get_storage

router = APIRouter(prefix="/admin/content", tags=["Admin: Content"])


# ---------------------------------------------------------------------------
# Shared file validation (HTTP concern — stays in the router)
# ---------------------------------------------------------------------------

async def _validate_and_read_file(file: UploadFile) -> bytes:
    contents = await file.read()

    if len(contents) == 0:
        raise InvalidInputError("Uploaded file is empty.", code="EMPTY_FILE")

    if len(contents) > settings.max_upload_size_bytes:
        raise AppException(
            f"File size exceeds the {settings.max_upload_size_mb}MB limit.",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            code="FILE_TOO_LARGE",
        )

    return contents


@router.post("", response_model=DataResponse[ContentOut], status_code=status.HTTP_201_CREATED)
async def create_content(
    body: ContentCreate,
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    """Register metadata for an asset that is already in storage."""
    content = await ContentAdminService(executor).create_content(
        content_id=body.id,
        content_type=body.content_type,
        title=body.title,
        description=body.description,
        filename=body.filename,
        mime_type=body.mime_type,
        size=body.bytes,
    )
    return {"data": ContentOut.model_validate(content)}


@router.post("/upload", response_model=DataResponse[ContentOut], status_code=status.HTTP_201_CREATED)
async def upload_content(
    file: UploadFile = File(...),
    content_type: Optional[str] = Form(default=None, alias="contentType"),
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    executor: TrustedExecutor = Depends(get_admin_executor),
    storage: CloudinaryStorage = Depends(get_storage),
):
    """Upload a file to storage (authenticated delivery) and record its metadata.

    Without `contentType` the kind is derived from the MIME type.
    """
    data = await _validate_and_read_file(file)
    content = await ContentAdminService(executor, storage).upload_content(
        data,
        filename=file.filename,
        mime_type=file.content_type,
        content_type=content_type,
        title=title,
        description=description,
    )
    return {"data": ContentOut.model_validate(content)}


@router.get("", response_model=ListResponse[ContentOut])
async def list_contents(
    content_type: Optional[str] = Query(default=None, alias="contentType"),
    pagination: PaginationParams = Depends(),
    executor: TrustedExecutor = Depends(get_admin_executor),
):
    items, total = await ContentAdminService(executor).list_contents(pagination, content_type)
    return paginated(
        [ContentOut.model_validate(c) for c in items],
        total, pagination.page, pagination.limit,
    )
