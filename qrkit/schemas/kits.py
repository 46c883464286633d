"""Kit, kit item and grant schemas."""


from datetime import datetime

from pydantic import Field

from qrkit.schemas.common import CamelModel


class KitCreate(CamelModel):
    name: str = Field(..., max_length=255)
    description: str | None = None


class KitOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime


class KitRef(CamelModel):
    kit_id: str


class KitItemCreate(CamelModel):
    kit_id: str
    content_type: str
    content_id: str


class KitItemOut(CamelModel):
    id: str
    kit_id: str
    content_type: str
    content_id: str
    created_at: datetime


class GrantRequest(CamelModel):
    qr_id: str
    kit_id: str


class RevokeGrantRequest(CamelModel):
    grant_id: str | None = None
    qr_id: str | None = None
    kit_id: str | None = None


class GrantOut(CamelModel):
    id: str
    qr_id: str
    kit_id: str
    granted_by_admin_id: str | None = None
    granted_at: datetime
    revoked_at: datetime | None = None
    revoked_by_admin_id: str | None = None


class KitDetailOut(CamelModel):
    kit: KitOut
    items: list[KitItemOut]
    grants: list[GrantOut]
