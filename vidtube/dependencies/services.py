"""Service providers.

Each service is built from the process settings; tests override
``get_settings`` (or a provider directly) through ``app.dependency_overrides``.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from vidtube.config import Settings, get_settings
from vidtube.database import get_db
from vidtube.services.action_token_service import ActionTokenService
from vidtube.services.email_service import EmailService
from vidtube.services.engagement_service import EngagementService
from vidtube.services.media_storage import MediaStorage
from vidtube.services.repositories import PlaylistRepository, UserRepository, VideoRepository
from vidtube.services.token_service import TokenService
from vidtube.services.view_aggregator import ViewAggregator


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_video_repository(db: Session = Depends(get_db)) -> VideoRepository:
    return VideoRepository(db)


def get_playlist_repository(db: Session = Depends(get_db)) -> PlaylistRepository:
    return PlaylistRepository(db)


def get_token_service(
    settings: Settings = Depends(get_settings),
    users: UserRepository = Depends(get_user_repository),
) -> TokenService:
    return TokenService(settings, users)


def get_action_token_service(settings: Settings = Depends(get_settings)) -> ActionTokenService:
    return ActionTokenService(settings)


def get_email_service(settings: Settings = Depends(get_settings)) -> EmailService:
    return EmailService(settings)


def get_media_storage(settings: Settings = Depends(get_settings)) -> MediaStorage:
    return MediaStorage(settings)


def get_view_aggregator(db: Session = Depends(get_db)) -> ViewAggregator:
    return ViewAggregator(db)


def get_engagement_service(db: Session = Depends(get_db)) -> EngagementService:
    return EngagementService(db)
