"""Video data access layer.

Centralizes the filtered, sorted listings used by the public feed, the
owner's own listing and the dashboard.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from vidtube.constants import DEFAULT_PAGE_LIMIT, VIDEO_SORT_FIELDS
from vidtube.errors import BadRequestError, NotFoundError
from vidtube.models import Video
from vidtube.services.pagination import page_offset

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


@dataclass
class VideoSearch:
    """Listing parameters shared by every video feed."""

    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    query: str | None = None
    sort_by: str = "created_at"
    sort_type: str = "desc"
    owner_id: str | None = None
    published_only: bool = True


class VideoRepository:
    """Centralized video data access."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, video_id: str) -> Video | None:
        """Find video by primary key with its owner loaded."""
        return (
            self._db.query(Video)
            .options(joinedload(Video.owner))
            .filter(Video.id == video_id)
            .first()
        )

    def get_by_id(self, video_id: str) -> Video:
        video = self.find_by_id(video_id)
        if video is None:
            raise NotFoundError("Video", video_id)
        return video

    def get_visible(self, video_id: str, viewer_id: str | None) -> Video:
        """Load a video the viewer may see; someone else's draft is NotFound."""
        video = self.find_by_id(video_id)
        if video is None or not video.is_visible_to(viewer_id):
            raise NotFoundError("Video", video_id)
        return video

    def find_by_ids(self, video_ids: list[str]) -> "Sequence[Video]":
        if not video_ids:
            return []
        return (
            self._db.query(Video)
            .options(joinedload(Video.owner))
            .filter(Video.id.in_(video_ids))
            .all()
        )

    def search(self, params: VideoSearch) -> "Sequence[Video]":
        """Filter, sort and slice videos.

        ``query`` is a case-insensitive substring match on title or description.
        """
        if params.sort_by not in VIDEO_SORT_FIELDS:
            raise BadRequestError(
                f"Cannot sort by '{params.sort_by}'. Allowed: {', '.join(VIDEO_SORT_FIELDS)}"
            )
        if params.sort_type not in ("asc", "desc"):
            raise BadRequestError("sort_type must be 'asc' or 'desc'")

        q = self._db.query(Video).options(joinedload(Video.owner))
        if params.published_only:
            q = q.filter(Video.is_published.is_(True))
        if params.owner_id:
            q = q.filter(Video.owner_id == params.owner_id)
        if params.query and params.query.strip():
            # autoescape: "%" and "_" in the term match literally
            term = params.query.strip()
            q = q.filter(
                or_(
                    Video.title.icontains(term, autoescape=True),
                    Video.description.icontains(term, autoescape=True),
                )
            )

        column = getattr(Video, params.sort_by)
        order = column.asc() if params.sort_type == "asc" else column.desc()
        q = q.order_by(order, Video.id)

        return q.offset(page_offset(params.page, params.limit)).limit(params.limit).all()
