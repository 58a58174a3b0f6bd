"""Schemas for the channel dashboard."""

from vidtube.schemas.common import APIModel


class ChannelStats(APIModel):
    total_videos: int = 0
    total_views: int = 0
    total_subscribers: int = 0
    total_likes: int = 0
