"""Schemas describing users and channels."""

from datetime import datetime

from vidtube.schemas.common import APIModel


class OwnerSummary(APIModel):
    """Display-only projection of a user embedded in other views."""

    id: str
    username: str
    full_name: str
    avatar: str


class UserInfo(APIModel):
    """A user as returned to that user (no secrets)."""

    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str | None = None
    is_verified: bool = False
    created_at: datetime | None = None


class ChannelProfile(APIModel):
    """Public channel page with subscription counters."""

    id: str
    username: str
    full_name: str
    email: str
    avatar: str
    cover_image: str | None = None
    subscriber_count: int = 0
    channel_subscribed_to_count: int = 0
    is_subscribed: bool = False
