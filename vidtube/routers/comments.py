"""Comment router."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vidtube.database import get_db
from vidtube.dependencies.auth import get_current_user
from vidtube.dependencies.ownership import get_owned_or_403
from vidtube.dependencies.pagination import PageParams, get_page_params
from vidtube.dependencies.services import get_video_repository, get_view_aggregator
from vidtube.models import Comment, User
from vidtube.schemas.comment import CommentCreate, CommentInfo, CommentWithOwner
from vidtube.schemas.common import ApiResponse, MessageData
from vidtube.services.repositories import VideoRepository
from vidtube.services.view_aggregator import ViewAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{video_id}", response_model=ApiResponse[list[CommentWithOwner]])
def list_video_comments(
    video_id: str,
    pages: PageParams = Depends(get_page_params),
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[CommentWithOwner]]:
    """One page of a video's comments, newest first."""
    comments = views.video_comments(video_id, pages.page, pages.limit)
    return ApiResponse(data=comments, message="Comments fetched successfully")


@router.post(
    "/{video_id}",
    response_model=ApiResponse[CommentInfo],
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    video_id: str,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[CommentInfo]:
    video = videos.get_visible(video_id, current_user.id)
    comment = Comment(content=data.content.strip(), video_id=video.id, owner_id=current_user.id)
    db.add(comment)
    db.commit()

    logger.info(f"Comment {comment.id} added to video {video_id}")
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=CommentInfo.model_validate(comment),
        message="Comment added successfully",
    )


@router.patch("/c/{comment_id}", response_model=ApiResponse[CommentInfo])
def update_comment(
    comment_id: str,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[CommentInfo]:
    comment = get_owned_or_403(db, Comment, comment_id, current_user, "update")
    comment.content = data.content.strip()
    db.commit()
    return ApiResponse(
        data=CommentInfo.model_validate(comment), message="Comment updated successfully"
    )


@router.delete("/c/{comment_id}", response_model=ApiResponse[MessageData])
def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[MessageData]:
    """Delete a comment and the likes on it (owner only)."""
    comment = get_owned_or_403(db, Comment, comment_id, current_user, "delete")
    db.delete(comment)
    db.commit()

    logger.info(f"Comment {comment_id} deleted by user {current_user.id}")
    return ApiResponse(data=MessageData(), message="Comment deleted successfully")
