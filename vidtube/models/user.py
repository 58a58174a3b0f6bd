"""User model: the credential store."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from sqlalchemy.types import JSON

from vidtube.database import Base
from vidtube.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from vidtube.models.playlist import Playlist
    from vidtube.models.tweet import Tweet
    from vidtube.models.video import Video


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A registered account, which is also a channel."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(100), index=True)
    avatar: Mapped[str] = mapped_column(String(500))
    cover_image: Mapped[str | None] = mapped_column(String(500))
    # Ordered video ids, oldest first
    watch_history: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), default=list
    )
    password_hash: Mapped[str] = mapped_column(String(255))
    # SHA-256 of the single active refresh token
    refresh_token_hash: Mapped[str | None] = mapped_column(String(64))
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)

    # Relationships
    videos: Mapped[list["Video"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )
    tweets: Mapped[list["Tweet"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )
    playlists: Mapped[list["Playlist"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )

    @validates("username", "email")
    def _normalize_identity(self, key: str, value: str) -> str:
        return value.strip().lower()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
