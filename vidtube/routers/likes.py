"""Like router: toggles on videos, comments and tweets."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vidtube.database import get_db
from vidtube.dependencies.auth import get_current_user
from vidtube.dependencies.services import get_engagement_service, get_view_aggregator
from vidtube.models import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.like import LikeState, VideoLikeCount
from vidtube.schemas.tweet import TweetInfo
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.engagement_service import EngagementService
from vidtube.services.view_aggregator import ViewAggregator

router = APIRouter(prefix="/likes", tags=["likes"])


def _like_response(liked: bool) -> ApiResponse[LikeState]:
    return ApiResponse(data=LikeState(liked=liked), message="Liked" if liked else "Unliked")


@router.post("/toggle/v/{video_id}", response_model=ApiResponse[LikeState])
def toggle_video_like(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service),
) -> ApiResponse[LikeState]:
    liked = engagement.toggle_video_like(current_user.id, video_id)
    db.commit()
    return _like_response(liked)


@router.post("/toggle/c/{comment_id}", response_model=ApiResponse[LikeState])
def toggle_comment_like(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service),
) -> ApiResponse[LikeState]:
    liked = engagement.toggle_comment_like(current_user.id, comment_id)
    db.commit()
    return _like_response(liked)


@router.post("/toggle/t/{tweet_id}", response_model=ApiResponse[LikeState])
def toggle_tweet_like(
    tweet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service),
) -> ApiResponse[LikeState]:
    liked = engagement.toggle_tweet_like(current_user.id, tweet_id)
    db.commit()
    return _like_response(liked)


@router.get("/videos", response_model=ApiResponse[list[VideoWithOwner]])
def list_liked_videos(
    current_user: User = Depends(get_current_user),
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[VideoWithOwner]]:
    return ApiResponse(
        data=views.liked_videos(current_user.id), message="Liked videos fetched successfully"
    )


@router.get("/tweets", response_model=ApiResponse[list[TweetInfo]])
def list_liked_tweets(
    current_user: User = Depends(get_current_user),
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[TweetInfo]]:
    return ApiResponse(
        data=views.liked_tweets(current_user.id), message="Liked tweets fetched successfully"
    )


@router.get("/count/{video_id}", response_model=ApiResponse[VideoLikeCount])
def get_video_like_count(
    video_id: str,
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[VideoLikeCount]:
    count = views.video_like_count(video_id)
    return ApiResponse(
        data=VideoLikeCount(video_id=video_id, like_count=count),
        message="Like count fetched successfully",
    )
