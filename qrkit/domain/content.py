"""SQLAlchemy ORM models for content metadata and playlists (organization only)."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from qrkit.db.base import Base
from qrkit.domain.mixins import CreatedAtMixin, SoftDeleteMixin, UUIDPrimaryKeyMixin


class Content(Base, CreatedAtMixin):
    """Metadata for an asset held by the storage provider.

    `id` doubles as the provider's public resource id.
    """

    __tablename__ = "contents"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    content_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    mime_type: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    bytes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    uploaded_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)


class Playlist(Base, UUIDPrimaryKeyMixin, CreatedAtMixin, SoftDeleteMixin):
    """Ordered grouping inside a kit. Never consulted for access decisions."""

    __tablename__ = "playlists"

    kit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("kits.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class PlaylistItem(Base, UUIDPrimaryKeyMixin, CreatedAtMixin):
    __tablename__ = "playlist_items"

    playlist_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("playlists.id"), nullable=False, index=True
    )
    content_id: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
