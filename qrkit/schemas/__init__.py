"""Pydantic schemas package.

Folder intent:
  common.py     — CamelModel base + HealthResponse (all schemas inherit CamelModel)
  qr.py         — bind / verify / admin QR lifecycle
  tokens.py     — access token mint
  content.py    — content metadata and the content access result
  kits.py       — kits, kit items, grants
  playlists.py  — playlist organization
"""
