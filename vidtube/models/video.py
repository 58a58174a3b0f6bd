"""Video model."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.database import Base
from vidtube.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from vidtube.models.comment import Comment
    from vidtube.models.like import Like
    from vidtube.models.user import User


class Video(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An uploaded video owned by a channel."""

    __tablename__ = "videos"
    __table_args__ = (Index("idx_videos_owner_published", "owner_id", "is_published"),)

    title: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str] = mapped_column(Text)
    video_file: Mapped[str] = mapped_column(String(500))
    thumbnail: Mapped[str] = mapped_column(String(500))
    views: Mapped[int] = mapped_column(Integer, default=0)
    duration: Mapped[float] = mapped_column(Float, default=0.0)  # seconds
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="videos")
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="video", cascade="all, delete-orphan"
    )
    likes: Mapped[list["Like"]] = relationship(
        back_populates="video", cascade="all, delete-orphan"
    )

    def is_visible_to(self, viewer_id: str | None) -> bool:
        """Published videos are public; drafts exist only for their owner."""
        return self.is_published or (viewer_id is not None and self.owner_id == viewer_id)

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, title='{self.title}', published={self.is_published})>"
