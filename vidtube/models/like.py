"""Like edge record.

A row exists while ``liked_by`` likes exactly one of a video, a comment or a
tweet; deleting the row is the "unlike".
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.database import Base
from vidtube.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from vidtube.models.comment import Comment
    from vidtube.models.tweet import Tweet
    from vidtube.models.user import User
    from vidtube.models.video import Video


class Like(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "likes"
    __table_args__ = (
        Index("idx_likes_video_user", "video_id", "liked_by_id"),
        Index("idx_likes_comment_user", "comment_id", "liked_by_id"),
        Index("idx_likes_tweet_user", "tweet_id", "liked_by_id"),
    )

    liked_by_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    video_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("videos.id", ondelete="CASCADE")
    )
    comment_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("comments.id", ondelete="CASCADE")
    )
    tweet_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("tweets.id", ondelete="CASCADE")
    )

    liked_by: Mapped["User"] = relationship()
    video: Mapped["Video | None"] = relationship(back_populates="likes")
    comment: Mapped["Comment | None"] = relationship(back_populates="likes")
    tweet: Mapped["Tweet | None"] = relationship(back_populates="likes")

    def __repr__(self) -> str:
        target = self.video_id or self.comment_id or self.tweet_id
        return f"<Like(id={self.id}, liked_by_id={self.liked_by_id}, target={target})>"
