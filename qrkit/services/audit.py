"""Append-only QR event sink.

Audit writes are part of the correctness contract of admin mutations: a
failed write raises, which rolls back the surrounding unit of work.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from qrkit.core.access import TrustedExecutor
from qrkit.core.exceptions import AuditWriteError
from qrkit.domain.qr import QR_EVENT_ACTIONS, QREvent
from qrkit.repositories.event import QREventRepository

logger = logging.getLogger(__name__)


class AuditSink:
    def __init__(self, executor: TrustedExecutor):
        self._repo = QREventRepository(executor.session)

    async def log_qr_event(
        self,
        *,
        qr_id: str,
        action: str,
        affected_user_id: str | None,
        admin_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> QREvent:
        if action not in QR_EVENT_ACTIONS:
            raise ValueError(f"Unknown QR event action: {action}")
        try:
            event = await self._repo.create(
                qr_id=qr_id,
                admin_id=admin_id,
                affected_user_id=affected_user_id,
                action=action,
                details=details,
            )
        except SQLAlchemyError as exc:
            logger.error("Failed to append %s event for QR %s: %s", action, qr_id, exc)
            raise AuditWriteError(f"Failed to log QR event: {action}") from exc
        logger.info("QR event %s qr=%s admin=%s", action, qr_id, admin_id)
        return event
