"""Playlist data access layer.

Membership rows live in ``playlist_videos`` with a dense 0-based
``position`` per playlist. Every write here keeps positions gap-free.
"""

import logging

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.orm import Session, selectinload

from vidtube.errors import NotFoundError
from vidtube.models import Playlist, playlist_videos

logger = logging.getLogger(__name__)


class PlaylistRepository:
    """Centralized playlist data access."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, playlist_id: str) -> Playlist | None:
        """Find playlist by primary key with its videos loaded in order."""
        return (
            self._db.query(Playlist)
            .options(selectinload(Playlist.videos))
            .filter(Playlist.id == playlist_id)
            .first()
        )

    def get_by_id(self, playlist_id: str) -> Playlist:
        playlist = self.find_by_id(playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist", playlist_id)
        return playlist

    def find_by_owner(self, owner_id: str) -> list[Playlist]:
        return (
            self._db.query(Playlist)
            .options(selectinload(Playlist.videos))
            .filter(Playlist.owner_id == owner_id)
            .order_by(Playlist.created_at.desc())
            .all()
        )

    def position_of(self, playlist_id: str, video_id: str) -> int | None:
        return self._db.execute(
            select(playlist_videos.c.position).where(
                playlist_videos.c.playlist_id == playlist_id,
                playlist_videos.c.video_id == video_id,
            )
        ).scalar_one_or_none()

    def append_video(self, playlist_id: str, video_id: str) -> int:
        """Add a video after the last one. Returns its position."""
        next_position = self._db.execute(
            select(func.coalesce(func.max(playlist_videos.c.position) + 1, 0)).where(
                playlist_videos.c.playlist_id == playlist_id
            )
        ).scalar_one()
        self._db.execute(
            insert(playlist_videos).values(
                playlist_id=playlist_id, video_id=video_id, position=next_position
            )
        )
        return next_position

    def remove_video(self, playlist_id: str, video_id: str) -> bool:
        """Remove a video and shift later ones down.

        Returns:
            False if the video was not in the playlist.
        """
        position = self.position_of(playlist_id, video_id)
        if position is None:
            return False

        self._db.execute(
            delete(playlist_videos).where(
                playlist_videos.c.playlist_id == playlist_id,
                playlist_videos.c.video_id == video_id,
            )
        )
        self._db.execute(
            update(playlist_videos)
            .where(
                playlist_videos.c.playlist_id == playlist_id,
                playlist_videos.c.position > position,
            )
            .values(position=playlist_videos.c.position - 1)
        )
        return True

    def remove_video_everywhere(self, video_id: str) -> int:
        """Remove a video from every playlist holding it. Returns how many."""
        playlist_ids = (
            self._db.execute(
                select(playlist_videos.c.playlist_id).where(
                    playlist_videos.c.video_id == video_id
                )
            )
            .scalars()
            .all()
        )
        for playlist_id in playlist_ids:
            self.remove_video(playlist_id, video_id)
        if playlist_ids:
            logger.info(f"Removed video {video_id} from {len(playlist_ids)} playlist(s)")
        return len(playlist_ids)

    def clear(self, playlist_id: str) -> None:
        self._db.execute(
            delete(playlist_videos).where(playlist_videos.c.playlist_id == playlist_id)
        )
