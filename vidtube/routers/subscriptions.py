"""Subscription router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vidtube.database import get_db
from vidtube.dependencies.auth import get_current_user
from vidtube.dependencies.services import get_engagement_service, get_view_aggregator
from vidtube.models import User
from vidtube.schemas.common import ApiResponse
from vidtube.schemas.subscription import SubscriptionEntry, SubscriptionState
from vidtube.services.engagement_service import EngagementService
from vidtube.services.view_aggregator import ViewAggregator

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}", response_model=ApiResponse[SubscriptionState])
def toggle_subscription(
    channel_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service),
) -> ApiResponse[SubscriptionState]:
    """Subscribe to a channel, or unsubscribe if already subscribed."""
    subscribed = engagement.toggle_subscription(current_user.id, channel_id)
    db.commit()
    return ApiResponse(
        data=SubscriptionState(subscribed=subscribed),
        message="Subscribed" if subscribed else "Unsubscribed",
    )


@router.get(
    "/c/{channel_id}",
    response_model=ApiResponse[list[SubscriptionEntry]],
    dependencies=[Depends(get_current_user)],
)
def list_channel_subscribers(
    channel_id: str,
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[SubscriptionEntry]]:
    return ApiResponse(
        data=views.channel_subscribers(channel_id),
        message="Subscribers fetched successfully",
    )


@router.get(
    "/u/{subscriber_id}",
    response_model=ApiResponse[list[SubscriptionEntry]],
    dependencies=[Depends(get_current_user)],
)
def list_subscribed_channels(
    subscriber_id: str,
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[SubscriptionEntry]]:
    return ApiResponse(
        data=views.subscribed_channels(subscriber_id),
        message="Subscribed channels fetched successfully",
    )
