"""QR binding and ownership verification (user-facing).

Two anti-enumeration boundaries live here:
  - bind never SELECTs by code; success is inferred from the rowcount of a
    single conditional UPDATE, so "missing" and "taken" look identical.
  - verify reads only rows bound to the caller; anything else is NOT_FOUND.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from qrkit.core.access import ScopedAccess
from qrkit.core.exceptions import OutcomeError
from qrkit.domain.mixins import utcnow
from qrkit.domain.qr import QRCode
from qrkit.repositories.qr import QRCodeRepository
from qrkit.services.validation import normalize, validate_format

logger = logging.getLogger(__name__)


@dataclass
class VerifyResult:
    belongs_to_user: bool
    is_bound: bool
    qr_code: QRCode | None = None
    error: str | None = None


class BindingService:
    def __init__(self, scope: ScopedAccess, clock: Callable[[], datetime] = utcnow):
        self._scope = scope
        self._repo = QRCodeRepository(scope.session)
        self._clock = clock

    async def bind(self, raw_code: str) -> None:
        """Permanently bind an unbound code to the caller.

        Raises OutcomeError INVALID_CODE for malformed input and ALREADY_BOUND
        when the update matched no row (unknown code or already claimed).
        """
        code = normalize(raw_code or "")
        if not validate_format(code):
            raise OutcomeError("QR code format is invalid", code="INVALID_CODE")

        affected = await self._repo.bind_if_unbound(code, self._scope.user_id, self._clock())
        if affected != 1:
            logger.info("Bind rejected for user %s", self._scope.user_id)
            raise OutcomeError("QR code is not available", code="ALREADY_BOUND")

        await self._scope.session.commit()
        logger.info("QR bound to user %s", self._scope.user_id)

    async def verify(self, raw_code: str) -> VerifyResult:
        code = normalize(raw_code or "")
        if not validate_format(code):
            return VerifyResult(belongs_to_user=False, is_bound=False, error="NOT_FOUND")

        qr = await self._repo.find_owned_by_code(code, self._scope.user_id)
        if qr is None:
            return VerifyResult(belongs_to_user=False, is_bound=False, error="NOT_FOUND")
        return VerifyResult(belongs_to_user=True, is_bound=True, qr_code=qr)
