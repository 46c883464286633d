"""Raw access token generation and one-way digest for storage."""

import hashlib
import secrets

TOKEN_BYTES = 32  # 256 bits of entropy


def generate_token() -> str:
    """URL-safe random token; returned to the caller once and never stored."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def digest_token(raw_token: str) -> str:
    """Hex SHA-256 of the raw token — the only form that is persisted."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
