"""Storage-access capabilities.

Services never receive a bare session. User-facing services get a
`ScopedAccess`, whose every query is restricted to rows the user owns;
admin services and the token-authenticated content gate get a
`TrustedExecutor`. Session-authenticated user routes can only obtain the
former.
"""

from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qrkit.core.security import get_current_user, require_admin
from qrkit.db.base import get_db
from qrkit.domain.user import User


@dataclass(frozen=True)
class ScopedAccess:
    """Storage access on behalf of one authenticated user."""

    session: AsyncSession
    user_id: str


@dataclass(frozen=True)
class TrustedExecutor:
    """Privileged storage access; `actor_id` is the admin, or None for token-gated calls."""

    session: AsyncSession
    actor_id: str | None = None


async def get_scoped_access(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> ScopedAccess:
    return ScopedAccess(session=session, user_id=user.id)


async def get_admin_executor(
    admin: User = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> TrustedExecutor:
    return TrustedExecutor(session=session, actor_id=admin.id)


async def get_token_gate_executor(
    session: AsyncSession = Depends(get_db),
) -> TrustedExecutor:
    """For routes authenticated by a single-use access token instead of a session."""
    return TrustedExecutor(session=session)
