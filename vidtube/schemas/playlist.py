"""Schemas for playlists."""

from datetime import datetime

from pydantic import Field

from vidtube.schemas.common import APIModel


class PlaylistCreate(APIModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field("", max_length=5000)


class PlaylistUpdate(APIModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)


class PlaylistVideo(APIModel):
    """Video projection shown inside a playlist."""

    id: str
    title: str
    description: str
    thumbnail: str
    video_file: str


class PlaylistInfo(APIModel):
    id: str
    name: str
    description: str
    owner_id: str
    videos: list[PlaylistVideo] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
