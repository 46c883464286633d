"""Services package — all business logic lives here, never in routers.

Files:
  validation.py    — QR code format + metadata allow-list (pure)
  binding.py       — bind / verify on behalf of the signed-in user
  tokens.py        — single-use access token mint and consume
  content_gate.py  — token -> kit membership -> signed delivery URL
  admin_qr.py      — generate / revoke / reassign QR codes
  entitlements.py  — kits, kit items, QR-to-kit grants
  playlists.py     — playlist organization (never consulted for access)
  contents.py      — content metadata + uploads
  library.py       — the user's own QR codes, events, kits, playlists
  audit.py         — append-only QR event sink
  storage.py       — Cloudinary signer/uploader

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
