"""Tweet model: short text posts on a channel."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.database import Base
from vidtube.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from vidtube.models.like import Like
    from vidtube.models.user import User


class Tweet(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "tweets"

    content: Mapped[str] = mapped_column(Text)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )

    owner: Mapped["User"] = relationship(back_populates="tweets")
    likes: Mapped[list["Like"]] = relationship(
        back_populates="tweet", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Tweet(id={self.id}, owner_id={self.owner_id})>"
