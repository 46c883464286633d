"""SQLAlchemy ORM model for single-use content access tokens."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from qrkit.db.base import Base
from qrkit.domain.mixins import CreatedAtMixin, UUIDPrimaryKeyMixin


class AccessToken(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    """Only the SHA-256 digest is stored; the raw token is returned once at mint."""

    __tablename__ = "access_tokens"

    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)

    qr_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("qr_codes.id"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    kit_id: Mapped[str] = mapped_column(String(36), ForeignKey("kits.id"), nullable=False)

    # Expiry is enforced lazily at consume time; there is no sweeper
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    purpose: Mapped[str] = mapped_column(String(50), nullable=False)
