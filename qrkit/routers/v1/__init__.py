"""v1 router package — all /api/v1/* endpoints live here.

Files:
  qr.py               — bind / verify (session user)
  tokens.py           — access token mint (session user)
  content.py          — token-gated content delivery + content batch
  library.py          — /me/*, user playlist reads
  admin_qr.py         — QR generate / revoke / reassign / audit views
  admin_kits.py       — kits, kit items, grants
  admin_playlists.py  — playlist organization
  admin_content.py    — content metadata + uploads

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to qrkit/services/.
"""

from fastapi import APIRouter

from qrkit.routers.v1 import (
    admin_content,
    admin_kits,
    admin_playlists,
    admin_qr,
    content,
    library,
    qr,
    tokens,
)

api_router = APIRouter(prefix="/api/v1")

for _module in (qr, tokens, content, library, admin_qr, admin_kits, admin_playlists, admin_content):
    api_router.include_router(_module.router)
