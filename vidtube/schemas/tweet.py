"""Schemas for tweets."""

from datetime import datetime

from pydantic import Field

from vidtube.schemas.common import APIModel


class TweetCreate(APIModel):
    content: str = Field(min_length=1, max_length=1000)


class TweetInfo(APIModel):
    id: str
    content: str
    owner_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TweetWithLikes(TweetInfo):
    like_count: int = 0
