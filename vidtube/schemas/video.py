"""Schemas for videos."""

from datetime import datetime

from vidtube.schemas.common import APIModel
from vidtube.schemas.user import OwnerSummary


class VideoInfo(APIModel):
    id: str
    title: str
    description: str
    video_file: str
    thumbnail: str
    views: int
    duration: float
    is_published: bool
    owner_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class VideoWithOwner(VideoInfo):
    """Video with its channel's display fields (watch history, listings)."""

    owner: OwnerSummary


class PublishState(APIModel):
    id: str
    is_published: bool
