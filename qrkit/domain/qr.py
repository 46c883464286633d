"""SQLAlchemy ORM models for QR credentials and their append-only event trail."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from qrkit.db.base import Base
from qrkit.domain.mixins import CreatedAtMixin, UUIDPrimaryKeyMixin


class QRCode(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    """A physical credential.

    Lifecycle: unbound -> bound (bound_by_user_id set exactly once) and
    active -> revoked (is_active cleared exactly once). Rows are never deleted.
    """

    __tablename__ = "qr_codes"

    code: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)

    bound_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    bound_by_user_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=True, index=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_by_admin_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    # Allow-listed, non-identifying keys only (see services.validation)
    meta: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)


QR_EVENT_GENERATED = "GENERATED"
QR_EVENT_BOUND = "BOUND"
QR_EVENT_REVOKED = "REVOKED"
QR_EVENT_REASSIGNED = "REASSIGNED"
QR_EVENT_ACTIONS = (QR_EVENT_GENERATED, QR_EVENT_BOUND, QR_EVENT_REVOKED, QR_EVENT_REASSIGNED)


class QREvent(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    # No updated_at / deleted_at — audit rows are immutable
    __tablename__ = "qr_events"

    qr_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("qr_codes.id"), nullable=False, index=True
    )
    admin_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)  # NULL for user-driven events
    affected_user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    action: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    details: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
