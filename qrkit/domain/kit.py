"""SQLAlchemy ORM models for kits, kit membership and QR-to-kit grants."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from qrkit.db.base import Base
from qrkit.domain.mixins import CreatedAtMixin, UUIDPrimaryKeyMixin, utcnow


class Kit(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    """A licensed bundle of content."""

    __tablename__ = "kits"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class KitItem(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    """Static membership of one content item in a kit. The only source of access decisions."""

    __tablename__ = "kit_items"
    __table_args__ = (
        UniqueConstraint("kit_id", "content_type", "content_id", name="uq_kit_items_membership"),
    )

    kit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("kits.id"), nullable=False, index=True
    )
    # "VIDEO" | "IMAGE" | "FILE" | ...
    content_type: Mapped[str] = mapped_column(String(50), nullable=False)
    content_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)


class QRKitGrant(Base, UUIDPrimaryKeyMixin):
    """Entitlement of a QR to a kit, soft-revocable."""

    __tablename__ = "qr_kit_grants"
    __table_args__ = (
        # Backstop for the conditional insert: one active grant per (qr, kit)
        Index(
            "uq_qr_kit_grants_active",
            "qr_id",
            "kit_id",
            unique=True,
            sqlite_where=text("revoked_at IS NULL"),
            postgresql_where=text("revoked_at IS NULL"),
        ),
    )

    qr_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("qr_codes.id"), nullable=False, index=True
    )
    kit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("kits.id"), nullable=False, index=True
    )
    granted_by_admin_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    granted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    revoked_by_admin_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
