"""Toggle operations on edge records (likes, subscriptions).

A toggle looks for the edge matching (target, actor): if present it is
deleted and the new state is False, otherwise it is created and the new
state is True. The check and the write are not wrapped in a transaction;
two identical concurrent toggles may both insert. Reads treat any number of
duplicate edges as a single "on" state, and the next toggle removes them all.
"""

import logging

from sqlalchemy.orm import Session

from vidtube.errors import BadRequestError, NotFoundError
from vidtube.models import Comment, Like, Subscription, Tweet, User, Video

logger = logging.getLogger(__name__)


class EngagementService:
    """Likes and subscriptions."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def _toggle(self, model: type, **match: str) -> bool:
        existing = self._db.query(model).filter_by(**match).all()
        if existing:
            for edge in existing:
                self._db.delete(edge)
            self._db.flush()
            return False

        self._db.add(model(**match))
        self._db.flush()
        return True

    def toggle_video_like(self, user_id: str, video_id: str) -> bool:
        video = self._db.get(Video, video_id)
        # Unpublished videos can only be liked by their owner
        if video is None or not video.is_visible_to(user_id):
            raise NotFoundError("Video", video_id)
        liked = self._toggle(Like, video_id=video_id, liked_by_id=user_id)
        logger.info(f"User {user_id} {'liked' if liked else 'unliked'} video {video_id}")
        return liked

    def toggle_comment_like(self, user_id: str, comment_id: str) -> bool:
        if self._db.get(Comment, comment_id) is None:
            raise NotFoundError("Comment", comment_id)
        return self._toggle(Like, comment_id=comment_id, liked_by_id=user_id)

    def toggle_tweet_like(self, user_id: str, tweet_id: str) -> bool:
        if self._db.get(Tweet, tweet_id) is None:
            raise NotFoundError("Tweet", tweet_id)
        return self._toggle(Like, tweet_id=tweet_id, liked_by_id=user_id)

    def toggle_subscription(self, subscriber_id: str, channel_id: str) -> bool:
        if subscriber_id == channel_id:
            raise BadRequestError("You cannot subscribe to your own channel")
        if self._db.get(User, channel_id) is None:
            raise NotFoundError("Channel", channel_id)
        subscribed = self._toggle(
            Subscription, channel_id=channel_id, subscriber_id=subscriber_id
        )
        logger.info(
            f"User {subscriber_id} {'subscribed to' if subscribed else 'unsubscribed from'} "
            f"channel {channel_id}"
        )
        return subscribed
