"""Joined read models built from several tables.

Each method answers one screen of the client: a channel page, the watch
history, the dashboard counters, the comment thread under a video, and so
on. Counters are computed in the database (count/sum with group by); a
group that yields no row is read as zero explicitly.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased, joinedload

from vidtube.errors import NotFoundError
from vidtube.models import Comment, Like, Playlist, Subscription, Tweet, User, Video
from vidtube.schemas.comment import CommentWithOwner
from vidtube.schemas.dashboard import ChannelStats
from vidtube.schemas.playlist import PlaylistInfo
from vidtube.schemas.subscription import SubscriptionEntry
from vidtube.schemas.tweet import TweetInfo, TweetWithLikes
from vidtube.schemas.user import ChannelProfile, OwnerSummary
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.pagination import page_offset
from vidtube.services.repositories import PlaylistRepository, UserRepository, VideoRepository

logger = logging.getLogger(__name__)


class ViewAggregator:
    """Builds derived, joined views for the read endpoints."""

    def __init__(self, db: Session) -> None:
        self._db = db
        self._users = UserRepository(db)
        self._videos = VideoRepository(db)
        self._playlists = PlaylistRepository(db)

    # ------------------------------------------------------------------
    # Channel and user views
    # ------------------------------------------------------------------

    def channel_profile(self, username: str, viewer_id: str | None = None) -> ChannelProfile:
        """Channel page: profile fields plus subscription counters.

        ``is_subscribed`` is True only if ``viewer_id`` is among the
        subscribers of this channel.

        Raises:
            NotFoundError: No user has this username (case-insensitive).
        """
        subscribers = aliased(Subscription)
        subscriptions = aliased(Subscription)

        subscriber_count = (
            select(func.count(subscribers.id))
            .where(subscribers.channel_id == User.id)
            .scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(subscriptions.id))
            .where(subscriptions.subscriber_id == User.id)
            .scalar_subquery()
        )
        columns = [User, subscriber_count, subscribed_to_count]
        if viewer_id:
            viewer_edge = aliased(Subscription)
            columns.append(
                select(viewer_edge.id)
                .where(viewer_edge.channel_id == User.id, viewer_edge.subscriber_id == viewer_id)
                .exists()
            )

        row = (
            self._db.query(*columns)
            .filter(func.lower(User.username) == username.strip().lower())
            .first()
        )
        if row is None:
            raise NotFoundError("Channel", username)

        user = row[0]
        return ChannelProfile(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            email=user.email,
            avatar=user.avatar,
            cover_image=user.cover_image,
            subscriber_count=row[1] or 0,
            channel_subscribed_to_count=row[2] or 0,
            is_subscribed=bool(row[3]) if viewer_id else False,
        )

    def watch_history(self, user_id: str) -> list[VideoWithOwner]:
        """Watched videos in history order (most recent last) with owner summaries.

        History entries whose video has since been deleted, or unpublished by
        someone else, are skipped.
        """
        user = self._users.get_by_id(user_id)
        history = list(user.watch_history or [])
        videos = {video.id: video for video in self._videos.find_by_ids(history)}
        return [
            VideoWithOwner.model_validate(videos[video_id])
            for video_id in history
            if video_id in videos and videos[video_id].is_visible_to(user_id)
        ]

    def channel_stats(self, user_id: str) -> ChannelStats:
        """Dashboard totals for a channel.

        Three independent aggregations; each defaults to zero when its
        group is empty (e.g. a channel with no videos).
        """
        video_row = (
            self._db.query(
                func.count(Video.id).label("total_videos"),
                func.coalesce(func.sum(Video.views), 0).label("total_views"),
            )
            .filter(Video.owner_id == user_id)
            .group_by(Video.owner_id)
            .first()
        )
        subscriber_row = (
            self._db.query(func.count(Subscription.id).label("total_subscribers"))
            .filter(Subscription.channel_id == user_id)
            .group_by(Subscription.channel_id)
            .first()
        )
        like_row = (
            self._db.query(func.count(Like.id).label("total_likes"))
            .join(Video, Like.video_id == Video.id)
            .filter(Video.owner_id == user_id)
            .group_by(Video.owner_id)
            .first()
        )

        return ChannelStats(
            total_videos=video_row.total_videos if video_row is not None else 0,
            total_views=int(video_row.total_views) if video_row is not None else 0,
            total_subscribers=(
                subscriber_row.total_subscribers if subscriber_row is not None else 0
            ),
            total_likes=like_row.total_likes if like_row is not None else 0,
        )

    def channel_subscribers(self, channel_id: str) -> list[SubscriptionEntry]:
        """Users subscribed to ``channel_id``, newest first."""
        self._users.get_by_id(channel_id)
        rows = (
            self._db.query(Subscription, User)
            .join(User, Subscription.subscriber_id == User.id)
            .filter(Subscription.channel_id == channel_id)
            .order_by(Subscription.created_at.desc())
            .all()
        )
        return [self._subscription_entry(sub, user) for sub, user in rows]

    def subscribed_channels(self, subscriber_id: str) -> list[SubscriptionEntry]:
        """Channels ``subscriber_id`` follows, newest first."""
        self._users.get_by_id(subscriber_id)
        rows = (
            self._db.query(Subscription, User)
            .join(User, Subscription.channel_id == User.id)
            .filter(Subscription.subscriber_id == subscriber_id)
            .order_by(Subscription.created_at.desc())
            .all()
        )
        return [self._subscription_entry(sub, user) for sub, user in rows]

    @staticmethod
    def _subscription_entry(subscription: Subscription, user: User) -> SubscriptionEntry:
        return SubscriptionEntry(
            user=OwnerSummary.model_validate(user), subscribed_at=subscription.created_at
        )

    # ------------------------------------------------------------------
    # Engagement views
    # ------------------------------------------------------------------

    def video_comments(self, video_id: str, page: int, limit: int) -> list[CommentWithOwner]:
        """One page of a video's comments, newest first, with like counts."""
        self._videos.get_by_id(video_id)

        like_count = (
            select(func.count(Like.id)).where(Like.comment_id == Comment.id).scalar_subquery()
        )
        rows = (
            self._db.query(Comment, like_count)
            .options(joinedload(Comment.owner))
            .filter(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id)
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )
        return [
            CommentWithOwner(
                id=comment.id,
                content=comment.content,
                video_id=comment.video_id,
                owner_id=comment.owner_id,
                created_at=comment.created_at,
                updated_at=comment.updated_at,
                owner=OwnerSummary.model_validate(comment.owner),
                like_count=count or 0,
            )
            for comment, count in rows
        ]

    def video_like_count(self, video_id: str) -> int:
        self._videos.get_by_id(video_id)
        row = (
            self._db.query(func.count(Like.id).label("like_count"))
            .filter(Like.video_id == video_id)
            .group_by(Like.video_id)
            .first()
        )
        return row.like_count if row is not None else 0

    def liked_videos(self, user_id: str) -> list[VideoWithOwner]:
        """Videos liked by ``user_id``, most recently liked first.

        Unpublished videos are hidden unless the liker owns them.
        """
        rows = (
            self._db.query(Video)
            .join(Like, Like.video_id == Video.id)
            .options(joinedload(Video.owner))
            .filter(Like.liked_by_id == user_id)
            .filter((Video.is_published.is_(True)) | (Video.owner_id == user_id))
            .order_by(Like.created_at.desc())
            .all()
        )
        return [VideoWithOwner.model_validate(video) for video in rows]

    def liked_tweets(self, user_id: str) -> list[TweetInfo]:
        rows = (
            self._db.query(Tweet)
            .join(Like, Like.tweet_id == Tweet.id)
            .filter(Like.liked_by_id == user_id)
            .order_by(Like.created_at.desc())
            .all()
        )
        return [TweetInfo.model_validate(tweet) for tweet in rows]

    def user_tweets(self, user_id: str) -> list[TweetWithLikes]:
        """A channel's tweets, newest first, with like counts."""
        self._users.get_by_id(user_id)
        like_count = (
            select(func.count(Like.id)).where(Like.tweet_id == Tweet.id).scalar_subquery()
        )
        rows = (
            self._db.query(Tweet, like_count)
            .filter(Tweet.owner_id == user_id)
            .order_by(Tweet.created_at.desc(), Tweet.id)
            .all()
        )
        return [
            TweetWithLikes(
                id=tweet.id,
                content=tweet.content,
                owner_id=tweet.owner_id,
                created_at=tweet.created_at,
                updated_at=tweet.updated_at,
                like_count=count or 0,
            )
            for tweet, count in rows
        ]

    # ------------------------------------------------------------------
    # Playlists
    # ------------------------------------------------------------------

    def user_playlists(self, user_id: str, viewer_id: str | None = None) -> list[PlaylistInfo]:
        """A user's playlists with the videos ``viewer_id`` may see, in playlist order."""
        self._users.get_by_id(user_id)
        return [
            self.playlist_info(playlist, viewer_id)
            for playlist in self._playlists.find_by_owner(user_id)
        ]

    @staticmethod
    def playlist_info(playlist: Playlist, viewer_id: str | None = None) -> PlaylistInfo:
        """Project a playlist, dropping drafts the viewer does not own.

        A video may be unpublished after it was added, so this runs on every read.
        """
        info = PlaylistInfo.model_validate(playlist)
        visible = {video.id for video in playlist.videos if video.is_visible_to(viewer_id)}
        info.videos = [video for video in info.videos if video.id in visible]
        return info
