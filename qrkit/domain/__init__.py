"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  user.py     — Accounts (identity anchor + role)
  qr.py       — QR credentials and the immutable QR event trail
  kit.py      — Kits, kit membership, QR-to-kit grants
  content.py  — Content metadata, playlists (organization only)
  token.py    — Single-use content access tokens (digest only)
  mixins.py   — Shared UUID / timestamp / soft-delete mixins
"""

from qrkit.domain.content import Content, Playlist, PlaylistItem
from qrkit.domain.kit import Kit, KitItem, QRKitGrant
from qrkit.domain.qr import QRCode, QREvent
from qrkit.domain.token import AccessToken
from qrkit.domain.user import User

__all__ = [
    "AccessToken",
    "Content",
    "Kit",
    "KitItem",
    "Playlist",
    "PlaylistItem",
    "QRCode",
    "QREvent",
    "QRKitGrant",
    "User",
]
