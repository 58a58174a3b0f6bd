"""Comment model."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.database import Base
from vidtube.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from vidtube.models.like import Like
    from vidtube.models.user import User
    from vidtube.models.video import Video


class Comment(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A comment left on a video."""

    __tablename__ = "comments"

    content: Mapped[str] = mapped_column(Text)
    video_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("videos.id", ondelete="CASCADE"), index=True
    )
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )

    video: Mapped["Video"] = relationship(back_populates="comments")
    owner: Mapped["User"] = relationship()
    likes: Mapped[list["Like"]] = relationship(
        back_populates="comment", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, video_id={self.video_id})>"
