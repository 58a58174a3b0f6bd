"""Channel dashboard router."""

from fastapi import APIRouter, Depends

from vidtube.dependencies.auth import get_current_user
from vidtube.dependencies.pagination import PageParams, get_page_params
from vidtube.dependencies.services import get_video_repository, get_view_aggregator
from vidtube.models import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.dashboard import ChannelStats
from vidtube.schemas.video import VideoInfo
from vidtube.services.repositories import VideoRepository, VideoSearch
from vidtube.services.view_aggregator import ViewAggregator

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ApiResponse[ChannelStats])
def get_channel_stats(
    current_user: User = Depends(get_current_user),
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[ChannelStats]:
    """Totals across the caller's channel: videos, views, subscribers, likes."""
    return ApiResponse(
        data=views.channel_stats(current_user.id),
        message="Channel stats fetched successfully",
    )


@router.get("/videos", response_model=ApiResponse[list[VideoInfo]])
def get_channel_videos(
    pages: PageParams = Depends(get_page_params),
    current_user: User = Depends(get_current_user),
    videos: VideoRepository = Depends(get_video_repository),
) -> ApiResponse[list[VideoInfo]]:
    """All of the caller's videos, published or not, newest first."""
    results = videos.search(
        VideoSearch(
            page=pages.page,
            limit=pages.limit,
            owner_id=current_user.id,
            published_only=False,
        )
    )
    return ApiResponse(
        data=[VideoInfo.model_validate(v) for v in results],
        message="Channel videos fetched successfully",
    )
