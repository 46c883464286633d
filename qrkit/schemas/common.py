"""Schema base for the API: camelCase on the wire, snake_case in Python."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from qrkit import __version__


class CamelModel(BaseModel):
    """Reads ORM rows directly and accepts either field names or their camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, from_attributes=True)


class HealthResponse(CamelModel):
    status: str = "ok"
    app: str
    env: str
    version: str = __version__
