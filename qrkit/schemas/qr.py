"""QR binding, verification and admin lifecycle schemas."""


from datetime import datetime
from typing import Any

from pydantic import Field

from qrkit.schemas.common import CamelModel


class CodeRequest(CamelModel):
    code: str = Field(..., max_length=64)


class QROut(CamelModel):
    id: str
    code: str
    created_at: datetime
    bound_at: datetime | None = None
    bound_by_user_id: str | None = None
    is_active: bool
    revoked_at: datetime | None = None
    revoked_by_admin_id: str | None = None
    # ORM attribute is `meta`; the column and the API field are `metadata`
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias="meta", serialization_alias="metadata"
    )


class VerifyResponse(CamelModel):
    success: bool
    belongs_to_user: bool
    is_bound: bool
    error: str | None = None
    qr: QROut | None = None


class QREventOut(CamelModel):
    id: str
    qr_id: str
    admin_id: str | None = None
    affected_user_id: str | None = None
    action: str
    details: dict[str, Any] | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Admin requests
# ---------------------------------------------------------------------------

class GenerateQRRequest(CamelModel):
    count: int = Field(default=1, ge=1, le=100)
    metadata: dict[str, Any] | None = None


class RevokeQRRequest(CamelModel):
    qr_id: str


class ReassignQRRequest(CamelModel):
    user_id: str
    metadata: dict[str, Any] | None = None
    revoke_old_qr: bool = Field(default=False, alias="revokeOldQR")
    old_qr_id: str | None = Field(default=None, alias="oldQRId")


class ReassignOut(CamelModel):
    new_qr_id: str
    qr: QROut
