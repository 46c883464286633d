"""Access token schemas."""


from datetime import datetime

from qrkit.schemas.common import CamelModel


class MintRequest(CamelModel):
    kit_id: str | None = None


class MintedTokenOut(CamelModel):
    """`token` is the raw value and is shown exactly once."""

    token: str
    expires_at: datetime
    kit_id: str
