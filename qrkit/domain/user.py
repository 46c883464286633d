"""SQLAlchemy ORM model for user accounts (identity anchor + role only)."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from qrkit.db.base import Base
from qrkit.domain.mixins import CreatedAtMixin, UUIDPrimaryKeyMixin

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "users"

    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    # "user" | "admin" — resolved server-side only, never from token claims
    role: Mapped[str] = mapped_column(String(20), default=ROLE_USER, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
