"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        _created_at(),
    )

    op.create_table(
        "qr_codes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(36), nullable=False, unique=True),
        sa.Column("bound_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("bound_by_user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by_admin_id", sa.String(36), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_qr_codes_code", "qr_codes", ["code"])
    op.create_index("ix_qr_codes_bound_by_user_id", "qr_codes", ["bound_by_user_id"])

    op.create_table(
        "qr_events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("qr_id", sa.String(36), sa.ForeignKey("qr_codes.id"), nullable=False),
        sa.Column("admin_id", sa.String(36), nullable=True),
        sa.Column("affected_user_id", sa.String(36), nullable=True),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        _created_at(),
    )
    op.create_index("ix_qr_events_qr_id", "qr_events", ["qr_id"])
    op.create_index("ix_qr_events_affected_user_id", "qr_events", ["affected_user_id"])
    op.create_index("ix_qr_events_action", "qr_events", ["action"])

    op.create_table(
        "kits",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )

    op.create_table(
        "kit_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("kit_id", sa.String(36), sa.ForeignKey("kits.id"), nullable=False),
        sa.Column("content_type", sa.String(50), nullable=False),
        sa.Column("content_id", sa.String(255), nullable=False),
        _created_at(),
        sa.UniqueConstraint("kit_id", "content_type", "content_id", name="uq_kit_items_membership"),
    )
    op.create_index("ix_kit_items_kit_id", "kit_items", ["kit_id"])
    op.create_index("ix_kit_items_content_id", "kit_items", ["content_id"])

    op.create_table(
        "qr_kit_grants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("qr_id", sa.String(36), sa.ForeignKey("qr_codes.id"), nullable=False),
        sa.Column("kit_id", sa.String(36), sa.ForeignKey("kits.id"), nullable=False),
        sa.Column("granted_by_admin_id", sa.String(36), nullable=True),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by_admin_id", sa.String(36), nullable=True),
    )
    op.create_index("ix_qr_kit_grants_qr_id", "qr_kit_grants", ["qr_id"])
    op.create_index("ix_qr_kit_grants_kit_id", "qr_kit_grants", ["kit_id"])
    op.create_index(
        "uq_qr_kit_grants_active",
        "qr_kit_grants",
        ["qr_id", "kit_id"],
        unique=True,
        sqlite_where=sa.text("revoked_at IS NULL"),
        postgresql_where=sa.text("revoked_at IS NULL"),
    )

    op.create_table(
        "contents",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("content_type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("filename", sa.String(255), nullable=True),
        sa.Column("mime_type", sa.String(128), nullable=True),
        sa.Column("bytes", sa.Integer(), nullable=True),
        sa.Column("uploaded_by", sa.String(36), nullable=True),
        _created_at(),
    )
    op.create_index("ix_contents_content_type", "contents", ["content_type"])

    op.create_table(
        "playlists",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("kit_id", sa.String(36), sa.ForeignKey("kits.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sort_index", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_playlists_kit_id", "playlists", ["kit_id"])

    op.create_table(
        "playlist_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("playlist_id", sa.String(36), sa.ForeignKey("playlists.id"), nullable=False),
        sa.Column("content_id", sa.String(255), nullable=False),
        sa.Column("sort_index", sa.Integer(), nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_playlist_items_playlist_id", "playlist_items", ["playlist_id"])

    op.create_table(
        "access_tokens",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("token_hash", sa.String(64), nullable=False, unique=True),
        sa.Column("qr_id", sa.String(36), sa.ForeignKey("qr_codes.id"), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("kit_id", sa.String(36), sa.ForeignKey("kits.id"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("purpose", sa.String(50), nullable=False),
        _created_at(),
    )
    op.create_index("ix_access_tokens_token_hash", "access_tokens", ["token_hash"])
    op.create_index("ix_access_tokens_qr_id", "access_tokens", ["qr_id"])
    op.create_index("ix_access_tokens_user_id", "access_tokens", ["user_id"])


def downgrade() -> None:
    op.drop_table("access_tokens")
    op.drop_table("playlist_items")
    op.drop_table("playlists")
    op.drop_table("contents")
    op.drop_index("uq_qr_kit_grants_active", table_name="qr_kit_grants")
    op.drop_table("qr_kit_grants")
    op.drop_table("kit_items")
    op.drop_table("kits")
    op.drop_table("qr_events")
    op.drop_table("qr_codes")
    op.drop_table("users")
