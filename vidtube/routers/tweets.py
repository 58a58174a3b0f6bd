"""Tweet router: short text posts on a channel."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vidtube.database import get_db
from vidtube.dependencies.auth import get_current_user
from vidtube.dependencies.ownership import get_owned_or_403
from vidtube.dependencies.services import get_view_aggregator
from vidtube.models import Tweet, User
from vidtube.schemas.common import ApiResponse, MessageData
from vidtube.schemas.tweet import TweetCreate, TweetInfo, TweetWithLikes
from vidtube.services.view_aggregator import ViewAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tweets", tags=["tweets"])


@router.post("", response_model=ApiResponse[TweetInfo], status_code=status.HTTP_201_CREATED)
def create_tweet(
    data: TweetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[TweetInfo]:
    tweet = Tweet(content=data.content.strip(), owner_id=current_user.id)
    db.add(tweet)
    db.commit()

    logger.info(f"Tweet {tweet.id} created by user {current_user.id}")
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=TweetInfo.model_validate(tweet),
        message="Tweet created successfully",
    )


@router.get("/user/{user_id}", response_model=ApiResponse[list[TweetWithLikes]])
def list_user_tweets(
    user_id: str,
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[TweetWithLikes]]:
    return ApiResponse(data=views.user_tweets(user_id), message="Tweets fetched successfully")


@router.patch("/{tweet_id}", response_model=ApiResponse[TweetInfo])
def update_tweet(
    tweet_id: str,
    data: TweetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[TweetInfo]:
    tweet = get_owned_or_403(db, Tweet, tweet_id, current_user, "update")
    tweet.content = data.content.strip()
    db.commit()
    return ApiResponse(data=TweetInfo.model_validate(tweet), message="Tweet updated successfully")


@router.delete("/{tweet_id}", response_model=ApiResponse[MessageData])
def delete_tweet(
    tweet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApiResponse[MessageData]:
    """Delete a tweet and the likes on it (owner only)."""
    tweet = get_owned_or_403(db, Tweet, tweet_id, current_user, "delete")
    db.delete(tweet)
    db.commit()

    logger.info(f"Tweet {tweet_id} deleted by user {current_user.id}")
    return ApiResponse(data=MessageData(), message="Tweet deleted successfully")
