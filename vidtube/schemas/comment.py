"""Schemas for comments."""

from datetime import datetime

from pydantic import Field

from vidtube.schemas.common import APIModel
from vidtube.schemas.user import OwnerSummary


class CommentCreate(APIModel):
    content: str = Field(min_length=1, max_length=5000)


class CommentInfo(APIModel):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CommentWithOwner(CommentInfo):
    owner: OwnerSummary
    like_count: int = 0
