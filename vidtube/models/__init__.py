"""SQLAlchemy ORM models."""

from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.playlist import Playlist, playlist_videos
from vidtube.models.subscription import Subscription
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.models.video import Video

__all__ = [
    "Comment",
    "Like",
    "Playlist",
    "Subscription",
    "Tweet",
    "User",
    "Video",
    "playlist_videos",
]
