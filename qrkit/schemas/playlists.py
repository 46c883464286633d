"""Playlist schemas. Playlists only order content; they never grant access."""


from datetime import datetime

from pydantic import Field

from qrkit.schemas.common import CamelModel


class PlaylistCreate(CamelModel):
    name: str = Field(..., max_length=255)
    description: str | None = None


class PlaylistUpdate(CamelModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None


class PlaylistOut(CamelModel):
    id: str
    kit_id: str
    name: str
    description: str | None = None
    sort_index: int
    created_at: datetime


class PlaylistItemCreate(CamelModel):
    content_id: str


class PlaylistItemOut(CamelModel):
    id: str
    playlist_id: str
    content_id: str
    sort_index: int


class ReorderRequest(CamelModel):
    content_ids: list[str]
