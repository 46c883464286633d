"""Bearer-token authentication and role resolution.

Session tokens are issued by the identity provider; this service only
verifies them. The caller's role always comes from the `users` row.
"""

import logging

import jwt
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from qrkit.core.config import settings
from qrkit.core.exceptions import ForbiddenError, ServiceConfigurationError, UnauthorizedError
from qrkit.db.base import get_db
from qrkit.domain.user import User
from qrkit.repositories.user import UserRepository

logger = logging.getLogger(__name__)


def decode_session_token(token: str) -> dict:
    """Verify signature/expiry of a session JWT and return its claims.

    Fails closed: without a configured secret no token is ever accepted.
    """
    if not settings.auth_jwt_secret:
        raise ServiceConfigurationError("AUTH_JWT_SECRET is not configured")
    options = {"require": ["sub", "exp"]}
    try:
        return jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            audience=settings.auth_jwt_audience,
            options=options if settings.auth_jwt_audience else {**options, "verify_aud": False},
        )
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("Session expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Invalid session") from exc


def _bearer(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth[len("Bearer "):].strip() or None


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the authenticated user or raise 401."""
    token = _bearer(request)
    if token is None:
        raise UnauthorizedError()
    claims = decode_session_token(token)
    user = await UserRepository(session).get_by_id(str(claims["sub"]))
    if user is None:
        raise UnauthorizedError("Unknown user")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Admin gate: authenticated first (401), then role == admin (403)."""
    if not user.is_admin:
        logger.warning("Non-admin user %s attempted an admin operation", user.id)
        raise ForbiddenError()
    return user
