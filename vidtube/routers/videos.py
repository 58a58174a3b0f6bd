"""Video router: listings, upload, owner-gated edits, watch history."""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from vidtube.constants import MediaFolder
from vidtube.database import get_db
from vidtube.dependencies.auth import get_current_user, get_current_user_optional
from vidtube.dependencies.ownership import ensure_owner
from vidtube.dependencies.pagination import PageParams, get_page_params
from vidtube.dependencies.services import (
    get_media_storage,
    get_playlist_repository,
    get_video_repository,
)
from vidtube.errors import BadRequestError, InternalError
from vidtube.models import User, Video
from vidtube.schemas.common import ApiResponse, MessageData
from vidtube.schemas.video import PublishState, VideoInfo, VideoWithOwner
from vidtube.services.media_storage import MediaStorage
from vidtube.services.repositories import PlaylistRepository, VideoRepository, VideoSearch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/videos", tags=["videos"])


def _search_params(
    pages: PageParams = Depends(get_page_params),
    query: str | None = Query(None, description="Substring of title or description"),
    sort_by: str = Query("created_at"),
    sort_type: str = Query("desc"),
    user_id: str | None = Query(None, description="Only videos of this channel"),
) -> VideoSearch:
    return VideoSearch(
        page=pages.page,
        limit=pages.limit,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        owner_id=user_id,
    )


def _get_visible_video(videos: VideoRepository, video_id: str, viewer: User | None) -> Video:
    """Load a video; unpublished ones exist only for their owner."""
    return videos.get_visible(video_id, viewer.id if viewer else None)


@router.get("/public", response_model=ApiResponse[list[VideoWithOwner]])
def list_public_videos(
    params: VideoSearch = Depends(_search_params),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[list[VideoWithOwner]]:
    """Published videos, optionally filtered by text and channel."""
    results = videos.search(params)
    return ApiResponse(
        data=[VideoWithOwner.model_validate(v) for v in results],
        message="Videos fetched successfully",
    )


@router.get("", response_model=ApiResponse[list[VideoWithOwner]])
def list_my_videos(
    params: VideoSearch = Depends(_search_params),
    current_user: User = Depends(get_current_user),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[list[VideoWithOwner]]:
    """The caller's own videos, unpublished ones included."""
    params.owner_id = current_user.id
    params.published_only = False
    results = videos.search(params)
    return ApiResponse(
        data=[VideoWithOwner.model_validate(v) for v in results],
        message="Videos fetched successfully",
    )


@router.post("", response_model=ApiResponse[VideoInfo], status_code=status.HTTP_201_CREATED)
def publish_video(
    title: str = Form(...),
    description: str = Form(...),
    video_file: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: MediaStorage = Depends(get_media_storage),
) -> ApiResponse[VideoInfo]:
    """Upload a video and its thumbnail. The video starts unpublished."""
    if not title.strip() or not description.strip():
        raise BadRequestError("Title and description are required")
    if video_file is None or not video_file.filename:
        raise BadRequestError("Please provide a video file")
    if thumbnail is None or not thumbnail.filename:
        raise BadRequestError("Please provide a thumbnail")

    # Both uploads pass the size check before either is stored
    video_path = storage.save_upload(video_file)
    try:
        thumbnail_path = storage.save_upload(thumbnail)
    except BadRequestError:
        storage.discard(video_path)
        raise

    stored_video = storage.store(
        video_path, MediaFolder.VIDEOS, probe_duration=True, filename=video_file.filename
    )
    if stored_video is None:
        storage.discard(thumbnail_path)
        raise InternalError("Video upload failed")

    stored_thumbnail = storage.store(
        thumbnail_path, MediaFolder.THUMBNAILS, filename=thumbnail.filename
    )
    if stored_thumbnail is None:
        storage.delete(stored_video.url)
        raise InternalError("Thumbnail upload failed")

    video = Video(
        title=title.strip(),
        description=description.strip(),
        video_file=stored_video.url,
        thumbnail=stored_thumbnail.url,
        views=0,
        duration=stored_video.duration or 0.0,
        is_published=False,
        owner_id=current_user.id,
    )
    db.add(video)
    db.commit()

    logger.info(f"Video {video.id} uploaded by user {current_user.id}")
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=VideoInfo.model_validate(video),
        message="Video uploaded successfully",
    )


@router.get("/{video_id}", response_model=ApiResponse[VideoWithOwner])
def get_video(
    video_id: str,
    db: Session = Depends(get_db),
    viewer: User | None = Depends(get_current_user_optional),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[VideoWithOwner]:
    """Fetch a video. Every fetch by someone other than the owner counts as a view."""
    video = _get_visible_video(videos, video_id, viewer)

    if viewer is None or viewer.id != video.owner_id:
        video.views += 1
        db.commit()

    return ApiResponse(
        data=VideoWithOwner.model_validate(video), message="Video fetched successfully"
    )


@router.patch("/{video_id}", response_model=ApiResponse[VideoInfo])
def update_video(
    video_id: str,
    title: str | None = Form(None),
    description: str | None = Form(None),
    thumbnail: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    videos: VideoRepository = Depends(get_video_repository),
    storage: MediaStorage = Depends(get_media_storage),
) -> ApiResponse[VideoInfo]:
    """Update title, description and/or thumbnail (owner only)."""
    video = videos.get_by_id(video_id)
    ensure_owner(video, current_user, "update")

    has_thumbnail = thumbnail is not None and bool(thumbnail.filename)
    if not ((title and title.strip()) or (description and description.strip()) or has_thumbnail):
        raise BadRequestError("At least one field is required")

    if title and title.strip():
        video.title = title.strip()
    if description and description.strip():
        video.description = description.strip()

    if has_thumbnail:
        stored = storage.store_upload(thumbnail, MediaFolder.THUMBNAILS)
        if stored is None:
            logger.warning(f"Thumbnail upload failed for video {video_id}, keeping previous")
        else:
            storage.delete(video.thumbnail)
            video.thumbnail = stored.url

    db.commit()
    return ApiResponse(data=VideoInfo.model_validate(video), message="Video updated successfully")


@router.delete("/{video_id}", response_model=ApiResponse[MessageData])
def delete_video(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    videos: VideoRepository = Depends(get_video_repository),
    playlists: PlaylistRepository = Depends(get_playlist_repository),
    storage: MediaStorage = Depends(get_media_storage),
) -> ApiResponse[MessageData]:
    """Delete a video with its comments, likes, playlist entries and media files."""
    video = videos.get_by_id(video_id)
    ensure_owner(video, current_user, "delete")

    media_urls = (video.video_file, video.thumbnail)
    playlists.remove_video_everywhere(video.id)
    db.delete(video)  # comments and likes go with it
    db.commit()

    for url in media_urls:
        storage.delete(url)

    logger.info(f"Video {video_id} deleted by user {current_user.id}")
    return ApiResponse(data=MessageData(), message="Video deleted successfully")


@router.patch("/{video_id}/toggle-publish", response_model=ApiResponse[PublishState])
def toggle_publish(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[PublishState]:
    video = videos.get_by_id(video_id)
    ensure_owner(video, current_user, "publish")

    video.is_published = not video.is_published
    db.commit()

    state = "published" if video.is_published else "unpublished"
    logger.info(f"Video {video_id} {state}")
    return ApiResponse(
        data=PublishState.model_validate(video), message=f"Video {state} successfully"
    )


@router.post("/history/{video_id}", response_model=ApiResponse[MessageData])
def add_to_watch_history(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[MessageData]:
    """Append a video to the caller's history. A re-watched video moves to the end."""
    _get_visible_video(videos, video_id, current_user)

    if video_id in current_user.watch_history:
        current_user.watch_history.remove(video_id)
    current_user.watch_history.append(video_id)
    db.commit()

    return ApiResponse(data=MessageData(), message="Video added to watch history")


@router.delete("/history/{video_id}", response_model=ApiResponse[MessageData])
def remove_from_watch_history(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[MessageData]:
    if video_id not in current_user.watch_history:
        raise BadRequestError("Video is not in watch history")

    current_user.watch_history.remove(video_id)
    db.commit()

    return ApiResponse(data=MessageData(), message="Video removed from watch history")
