"""Content metadata and content-access schemas."""


from datetime import datetime

from pydantic import Field

from qrkit.schemas.common import CamelModel


class ContentCreate(CamelModel):
    id: str | None = Field(default=None, max_length=255)
    content_type: str = Field(..., min_length=1, max_length=50)
    title: str | None = None
    description: str | None = None
    filename: str | None = None
    mime_type: str | None = None
    bytes: int | None = Field(default=None, ge=0)


class ContentOut(CamelModel):
    id: str
    content_type: str
    title: str | None = None
    description: str | None = None
    filename: str | None = None
    mime_type: str | None = None
    bytes: int | None = None
    uploaded_by: str | None = None
    created_at: datetime


class ContentBatchRequest(CamelModel):
    content_ids: list[str] = Field(default_factory=list, max_length=100)


class ContentAccessOut(CamelModel):
    content_url: str
    signed_url: str
    content_type: str
    content_id: str
    title: str | None = None
    mime_type: str | None = None
