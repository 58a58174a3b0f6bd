"""Playlist router.

Membership is kept in play order by ``PlaylistRepository``. Playlists are
public, but a video inside one is listed only if the viewer may see it.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vidtube.database import get_db
from vidtube.dependencies.auth import get_current_user, get_current_user_optional
from vidtube.dependencies.ownership import ensure_owner
from vidtube.dependencies.services import (
    get_playlist_repository,
    get_video_repository,
    get_view_aggregator,
)
from vidtube.errors import BadRequestError, ConflictError
from vidtube.models import Playlist, User
from vidtube.schemas.common import ApiResponse, MessageData
from vidtube.schemas.playlist import PlaylistCreate, PlaylistInfo, PlaylistUpdate
from vidtube.services.repositories import PlaylistRepository, VideoRepository
from vidtube.services.view_aggregator import ViewAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/playlists", tags=["playlists"])


@router.post("", response_model=ApiResponse[PlaylistInfo], status_code=status.HTTP_201_CREATED)
def create_playlist(
    data: PlaylistCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
) -> ApiResponse[PlaylistInfo]:
    playlist = Playlist(
        name=data.name.strip(),
        description=data.description.strip(),
        owner_id=current_user.id,
    )
    db.add(playlist)
    db.commit()

    logger.info(f"Playlist {playlist.id} created by user {current_user.id}")
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=ViewAggregator.playlist_info(playlists.get_by_id(playlist.id), current_user.id),
        message="Playlist created successfully",
    )


@router.get("/user/{user_id}", response_model=ApiResponse[list[PlaylistInfo]])
def list_user_playlists(
    user_id: str,
    viewer: User | None = Depends(get_current_user_optional),
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[PlaylistInfo]]:
    return ApiResponse(
        data=views.user_playlists(user_id, viewer.id if viewer else None),
        message="Playlists fetched successfully",
    )


@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistInfo])
def get_playlist(
    playlist_id: str,
    viewer: User | None = Depends(get_current_user_optional),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
) -> ApiResponse[PlaylistInfo]:
    return ApiResponse(
        data=ViewAggregator.playlist_info(
            playlists.get_by_id(playlist_id), viewer.id if viewer else None
        ),
        message="Playlist fetched successfully",
    )


@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistInfo])
def update_playlist(
    playlist_id: str,
    data: PlaylistUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
) -> ApiResponse[PlaylistInfo]:
    playlist = playlists.get_by_id(playlist_id)
    ensure_owner(playlist, current_user, "update")

    if data.name is None and data.description is None:
        raise BadRequestError("At least one field is required")

    if data.name is not None:
        playlist.name = data.name.strip()
    if data.description is not None:
        playlist.description = data.description.strip()
    db.commit()

    return ApiResponse(
        data=ViewAggregator.playlist_info(playlist, current_user.id),
        message="Playlist updated successfully",
    )


@router.delete("/{playlist_id}", response_model=ApiResponse[MessageData])
def delete_playlist(
    playlist_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
) -> ApiResponse[MessageData]:
    playlist = playlists.get_by_id(playlist_id)
    ensure_owner(playlist, current_user, "delete")

    playlists.clear(playlist.id)
    db.delete(playlist)
    db.commit()

    logger.info(f"Playlist {playlist_id} deleted by user {current_user.id}")
    return ApiResponse(data=MessageData(), message="Playlist deleted successfully")


@router.patch("/add/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistInfo])
def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[PlaylistInfo]:
    """Append a video the caller can see at the end of the playlist (owner only)."""
    playlist = playlists.get_by_id(playlist_id)
    ensure_owner(playlist, current_user, "modify")
    video = videos.get_visible(video_id, current_user.id)

    if playlists.position_of(playlist.id, video.id) is not None:
        raise ConflictError("Video is already in the playlist")

    playlists.append_video(playlist.id, video.id)
    db.commit()
    db.expire(playlist, ["videos"])

    return ApiResponse(
        data=ViewAggregator.playlist_info(playlist, current_user.id),
        message="Video added to playlist",
    )


@router.patch("/remove/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistInfo])
def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
) -> ApiResponse[PlaylistInfo]:
    """Remove a video and close the gap it leaves (owner only)."""
    playlist = playlists.get_by_id(playlist_id)
    ensure_owner(playlist, current_user, "modify")

    if not playlists.remove_video(playlist.id, video_id):
        raise BadRequestError("Video is not in the playlist")
    db.commit()
    db.expire(playlist, ["videos"])

    return ApiResponse(
        data=ViewAggregator.playlist_info(playlist, current_user.id),
        message="Video removed from playlist",
    )
