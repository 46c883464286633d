"""Single-use access tokens.

State machine: MINTED -> CONSUMED (used_at set) | EXPIRED (lazy, at consume
time). A token also dies when its QR is revoked, its grant is revoked or
its kit is disabled after mint; consume re-checks all of these in the
same UPDATE that marks it used.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from qrkit.core.access import ScopedAccess, TrustedExecutor
from qrkit.core.config import settings
from qrkit.core.exceptions import OutcomeError, UnauthorizedError
from qrkit.domain.mixins import utcnow
from qrkit.domain.token import AccessToken
from qrkit.repositories.grant import GrantRepository
from qrkit.repositories.qr import QRCodeRepository
from qrkit.repositories.token import AccessTokenRepository
from qrkit.services.token_codec import digest_token, generate_token

logger = logging.getLogger(__name__)


class InvalidTokenError(UnauthorizedError):
    """Every consume failure collapses into this one externally visible error."""

    def __init__(self, message: str = "Access token is invalid"):
        super().__init__(message, code="INVALID_TOKEN")


@dataclass
class MintedToken:
    token: str  # raw value; never retrievable again
    expires_at: datetime
    kit_id: str


class TokenMintService:
    def __init__(self, scope: ScopedAccess, clock: Callable[[], datetime] = utcnow):
        self._scope = scope
        self._session = scope.session
        self._qrs = QRCodeRepository(scope.session)
        self._grants = GrantRepository(scope.session)
        self._tokens = AccessTokenRepository(scope.session)
        self._clock = clock

    async def mint(self) -> MintedToken:
        """Mint for any active grant held by one of the caller's active QRs."""
        return await self._mint(kit_id=None)

    async def mint_for_kit(self, kit_id: str) -> MintedToken:
        """Mint scoped to `kit_id`; a missing grant for that kit is NO_ACTIVE_GRANT."""
        return await self._mint(kit_id=kit_id)

    async def _mint(self, kit_id: str | None) -> MintedToken:
        user_id = self._scope.user_id

        if not await self._qrs.active_ids_for_user(user_id):
            raise OutcomeError("No active QR is bound to this account", code="NO_ACTIVE_QR")

        # Any of the caller's active QRs may carry the grant
        grant = await self._grants.find_active_for_user(user_id, kit_id)
        if grant is None:
            raise OutcomeError("No active kit grant for this QR", code="NO_ACTIVE_GRANT")

        raw = generate_token()
        expires_at = self._clock() + settings.access_token_ttl
        await self._tokens.create(
            token_hash=digest_token(raw),
            qr_id=grant.qr_id,
            user_id=user_id,
            kit_id=grant.kit_id,
            expires_at=expires_at,
            purpose=settings.access_token_purpose,
        )
        await self._session.commit()
        logger.info("Access token minted user=%s qr=%s kit=%s", user_id, grant.qr_id, grant.kit_id)
        return MintedToken(token=raw, expires_at=expires_at, kit_id=grant.kit_id)


class TokenConsumer:
    def __init__(self, executor: TrustedExecutor, clock: Callable[[], datetime] = utcnow):
        self._session = executor.session
        self._tokens = AccessTokenRepository(executor.session)
        self._clock = clock

    async def consume(self, raw_token: str) -> AccessToken:
        """Atomically mark the token used and return the consumed row.

        Zero affected rows means unknown, used, expired, QR revoked, grant
        revoked or kit disabled; the caller cannot tell which.
        """
        if not raw_token or not isinstance(raw_token, str):
            raise InvalidTokenError()

        token_hash = digest_token(raw_token)
        affected = await self._tokens.consume(token_hash, self._clock())
        if affected != 1:
            logger.info("Access token rejected at consume")
            raise InvalidTokenError()

        # The spend is committed on its own so a later denial cannot roll it back
        await self._session.commit()

        consumed = await self._tokens.find_consumed(token_hash)
        if consumed is None:
            raise UnauthorizedError("Token consumption could not be confirmed", code="TOKEN_CONSUMPTION_FAILED")
        return consumed
