"""Schemas for likes."""

from vidtube.schemas.common import APIModel


class LikeState(APIModel):
    """Result of a like toggle: True when the edge now exists."""

    liked: bool


class VideoLikeCount(APIModel):
    video_id: str
    like_count: int
