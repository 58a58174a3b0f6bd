"""Account, session and channel router."""

import logging

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    Request,
    Response,
    UploadFile,
    status,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vidtube.config import Settings, get_settings
from vidtube.constants import ActionTokenPurpose, CookieName, MediaFolder
from vidtube.database import get_db
from vidtube.dependencies.auth import get_current_user, get_current_user_optional
from vidtube.dependencies.services import (
    get_action_token_service,
    get_email_service,
    get_media_storage,
    get_token_service,
    get_user_repository,
    get_view_aggregator,
)
from vidtube.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthenticatedError,
)
from vidtube.models.user import User
from vidtube.rate_limiter import limiter
from vidtube.schemas.auth import (
    ChangePasswordRequest,
    EmailRequest,
    LoginData,
    ProfileUpdate,
    ResetPasswordRequest,
    TokenPair,
    TokenRefresh,
    UserLogin,
    UserRegister,
)
from vidtube.schemas.common import ApiResponse, MessageData
from vidtube.schemas.user import ChannelProfile, UserInfo
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.action_token_service import ActionToken, ActionTokenService
from vidtube.services.auth_service import AuthService
from vidtube.services.email_service import EmailService
from vidtube.services.media_storage import MediaStorage
from vidtube.services.repositories import UserRepository
from vidtube.services.token_service import TokenService
from vidtube.services.view_aggregator import ViewAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

RESEND_VERIFICATION_MESSAGE = (
    "If that email exists and is unverified, we sent a new verification link."
)
FORGOT_PASSWORD_MESSAGE = "If that email exists, we sent a password reset link."


def _set_auth_cookies(response: Response, tokens: TokenPair, settings: Settings) -> None:
    """Both tokens as httpOnly cookies, each living as long as the token itself."""
    common = {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
    }
    response.set_cookie(
        CookieName.ACCESS_TOKEN,
        tokens.access_token,
        max_age=settings.access_token_expire_minutes * 60,
        **common,
    )
    response.set_cookie(
        CookieName.REFRESH_TOKEN,
        tokens.refresh_token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        **common,
    )


def _clear_auth_cookies(response: Response, settings: Settings) -> None:
    for name in (CookieName.ACCESS_TOKEN, CookieName.REFRESH_TOKEN):
        response.delete_cookie(
            name,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=settings.cookie_samesite,
        )


@router.post(
    "/register", response_model=ApiResponse[UserInfo], status_code=status.HTTP_201_CREATED
)
@limiter.limit("5/minute")
def register(
    request: Request,
    background_tasks: BackgroundTasks,
    full_name: str = Form(...),
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    users: UserRepository = Depends(get_user_repository),
    storage: MediaStorage = Depends(get_media_storage),
    action_tokens: ActionTokenService = Depends(get_action_token_service),
    email_service: EmailService = Depends(get_email_service),
) -> ApiResponse[UserInfo]:
    """Register a new (unverified) user and email a verification link."""
    data = UserRegister(full_name=full_name, username=username, email=email, password=password)

    if users.exists_with_username_or_email(data.username, data.email):
        raise ConflictError("User with this username or email already exists")

    if avatar is None or not avatar.filename:
        raise BadRequestError("Avatar file is required")

    # Both uploads pass the size check before either is stored
    avatar_path = storage.save_upload(avatar)
    try:
        cover_path = storage.save_upload(cover_image)
    except BadRequestError:
        storage.discard(avatar_path)
        raise

    stored_avatar = storage.store(avatar_path, MediaFolder.AVATARS, filename=avatar.filename)
    if stored_avatar is None:
        storage.discard(cover_path)
        raise InternalError("Failed to upload avatar")

    stored_cover = None
    if cover_path is not None:
        stored_cover = storage.store(
            cover_path, MediaFolder.COVER_IMAGES, filename=cover_image.filename
        )
        if stored_cover is None:
            logger.warning(f"Cover image upload failed for new user {data.username}, skipping")

    try:
        user = users.create(
            full_name=data.full_name,
            username=data.username,
            email=data.email,
            password_hash=AuthService.hash_password(data.password),
            avatar=stored_avatar.url,
            cover_image=stored_cover.url if stored_cover else None,
            is_verified=False,
        )
        db.commit()
    except IntegrityError:
        # A concurrent registration took the username or email after the check above
        db.rollback()
        storage.delete(stored_avatar.url)
        if stored_cover is not None:
            storage.delete(stored_cover.url)
        raise ConflictError("User with this username or email already exists")

    token = action_tokens.issue(user.id, ActionTokenPurpose.VERIFY_EMAIL)
    background_tasks.add_task(email_service.send_verification_email, user.email, token)

    logger.info(f"User registered (pending verification): {user.username}")
    return ApiResponse(
        status_code=status.HTTP_201_CREATED,
        data=UserInfo.model_validate(user),
        message="User registered successfully. Please check your email to verify your account.",
    )


@router.post("/login", response_model=ApiResponse[LoginData])
@limiter.limit("5/minute")
def login(
    request: Request,
    response: Response,
    data: UserLogin,
    db: Session = Depends(get_db),
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[LoginData]:
    """Login with username or email; tokens are returned and set as cookies."""
    user = users.find_by_identifier(data.identifier)
    if user is None:
        # Dummy verification keeps timing the same for unknown identifiers
        AuthService.verify_password(data.password, AuthService.get_dummy_hash())
        raise UnauthenticatedError("Invalid user credentials")

    if not AuthService.verify_password(data.password, user.password_hash):
        raise UnauthenticatedError("Invalid user credentials")

    if not user.is_verified:
        raise UnauthenticatedError("Please verify your account before logging in")

    pair = tokens.issue_token_pair(user)
    db.commit()
    _set_auth_cookies(response, pair, settings)

    logger.info(f"User logged in: {user.username}")
    return ApiResponse(
        data=LoginData(
            user=UserInfo.model_validate(user),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        ),
        message="User logged in successfully",
    )


@router.post("/logout", response_model=ApiResponse[MessageData])
def logout(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[MessageData]:
    """Logout: forget the stored refresh token and clear both cookies."""
    tokens.revoke(current_user)
    db.commit()
    _clear_auth_cookies(response, settings)

    logger.info(f"User logged out: {current_user.username}")
    return ApiResponse(data=MessageData(), message="User logged out successfully")


@router.post("/refresh-token", response_model=ApiResponse[TokenPair])
def refresh_token(
    request: Request,
    response: Response,
    data: TokenRefresh | None = None,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[TokenPair]:
    """Rotate the token pair. The refresh token comes from the cookie or the body."""
    incoming = request.cookies.get(CookieName.REFRESH_TOKEN)
    if not incoming and data is not None:
        incoming = data.refresh_token

    _, pair = tokens.rotate(incoming)
    db.commit()
    _set_auth_cookies(response, pair, settings)

    return ApiResponse(data=pair, message="Access token refreshed")


@router.post("/change-password", response_model=ApiResponse[MessageData])
def change_password(
    response: Response,
    data: ChangePasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    tokens: TokenService = Depends(get_token_service),
    email_service: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[MessageData]:
    """Change password while logged in. The current session is ended."""
    if not AuthService.verify_password(data.old_password, current_user.password_hash):
        raise BadRequestError("Invalid old password")

    current_user.password_hash = AuthService.hash_password(data.new_password)
    tokens.revoke(current_user)
    db.commit()
    _clear_auth_cookies(response, settings)

    background_tasks.add_task(
        email_service.send_password_changed_notification, current_user.email
    )

    logger.info(f"Password changed for user: {current_user.username}")
    return ApiResponse(
        data=MessageData(detail="Please log in again"),
        message="Password changed successfully",
    )


@router.get("/current-user", response_model=ApiResponse[UserInfo])
def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> ApiResponse[UserInfo]:
    return ApiResponse(
        data=UserInfo.model_validate(current_user), message="Current user fetched successfully"
    )


@router.patch("/update-profile", response_model=ApiResponse[UserInfo])
def update_profile(
    full_name: str | None = Form(None),
    email: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    cover_image: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    storage: MediaStorage = Depends(get_media_storage),
) -> ApiResponse[UserInfo]:
    """Update profile text fields and/or re-upload avatar and cover image.

    At least one field must be sent. Media that fails to store leaves the
    previous value in place.
    """
    has_avatar = avatar is not None and bool(avatar.filename)
    has_cover = cover_image is not None and bool(cover_image.filename)
    if not (full_name or email or has_avatar or has_cover):
        raise BadRequestError("At least one field is required")

    data = ProfileUpdate(full_name=full_name or None, email=email or None)

    if data.email and data.email.lower() != current_user.email:
        existing = users.find_by_email(data.email)
        if existing is not None and existing.id != current_user.id:
            raise ConflictError("Email is already in use")
        current_user.email = data.email

    if data.full_name:
        current_user.full_name = data.full_name.strip()

    if has_avatar:
        stored = storage.store_upload(avatar, MediaFolder.AVATARS)
        if stored is None:
            logger.warning(f"Avatar upload failed for user {current_user.id}, keeping previous")
        else:
            storage.delete(current_user.avatar)
            current_user.avatar = stored.url

    if has_cover:
        stored = storage.store_upload(cover_image, MediaFolder.COVER_IMAGES)
        if stored is None:
            logger.warning(f"Cover upload failed for user {current_user.id}, keeping previous")
        else:
            storage.delete(current_user.cover_image)
            current_user.cover_image = stored.url

    db.commit()

    logger.info(f"Profile updated for user: {current_user.username}")
    return ApiResponse(
        data=UserInfo.model_validate(current_user), message="Profile updated successfully"
    )


@router.get("/c/{username}", response_model=ApiResponse[ChannelProfile])
def get_channel_profile(
    username: str,
    viewer: User | None = Depends(get_current_user_optional),
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[ChannelProfile]:
    """Public channel page. ``isSubscribed`` reflects the viewer, if logged in."""
    profile = views.channel_profile(username, viewer.id if viewer else None)
    return ApiResponse(data=profile, message="Channel fetched successfully")


@router.get("/watch-history", response_model=ApiResponse[list[VideoWithOwner]])
def get_watch_history(
    current_user: User = Depends(get_current_user),
    views: ViewAggregator = Depends(get_view_aggregator),
) -> ApiResponse[list[VideoWithOwner]]:
    return ApiResponse(
        data=views.watch_history(current_user.id),
        message="Watch history fetched successfully",
    )


@router.get("/verify/{iv}/{token}", response_model=ApiResponse[MessageData])
def verify_email(
    iv: str,
    token: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    users: UserRepository = Depends(get_user_repository),
    action_tokens: ActionTokenService = Depends(get_action_token_service),
    email_service: EmailService = Depends(get_email_service),
) -> ApiResponse[MessageData]:
    """Verify an account from the emailed link."""
    user_id = action_tokens.redeem(
        ActionToken(iv=iv, token=token), ActionTokenPurpose.VERIFY_EMAIL
    )
    user = users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    if user.is_verified:
        return ApiResponse(data=MessageData(), message="Account is already verified")

    user.is_verified = True
    db.commit()

    background_tasks.add_task(email_service.send_welcome_email, user.email)

    logger.info(f"Account verified for user: {user.username}")
    return ApiResponse(
        data=MessageData(), message="Account verified successfully. You can now log in."
    )


@router.post("/resend-verification", response_model=ApiResponse[MessageData])
@limiter.limit("1/minute")
def resend_verification(
    request: Request,
    data: EmailRequest,
    background_tasks: BackgroundTasks,
    users: UserRepository = Depends(get_user_repository),
    action_tokens: ActionTokenService = Depends(get_action_token_service),
    email_service: EmailService = Depends(get_email_service),
) -> ApiResponse[MessageData]:
    """Send a fresh verification link. The answer never reveals whether the email exists."""
    user = users.find_by_email(data.email)

    if user is not None and not user.is_verified:
        token = action_tokens.issue(user.id, ActionTokenPurpose.VERIFY_EMAIL)
        background_tasks.add_task(email_service.send_verification_email, user.email, token)
        logger.info(f"Verification email resent to user: {user.username}")

    return ApiResponse(data=MessageData(), message=RESEND_VERIFICATION_MESSAGE)


@router.post("/forgot-password", response_model=ApiResponse[MessageData])
@limiter.limit("3/minute")
def forgot_password(
    request: Request,
    data: EmailRequest,
    background_tasks: BackgroundTasks,
    users: UserRepository = Depends(get_user_repository),
    action_tokens: ActionTokenService = Depends(get_action_token_service),
    email_service: EmailService = Depends(get_email_service),
) -> ApiResponse[MessageData]:
    """Email a password reset link. The answer never reveals whether the email exists."""
    user = users.find_by_email(data.email)

    if user is not None:
        token = action_tokens.issue(user.id, ActionTokenPurpose.RESET_PASSWORD)
        background_tasks.add_task(email_service.send_password_reset_email, user.email, token)
        logger.info(f"Password reset requested for user: {user.username}")

    return ApiResponse(data=MessageData(), message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password/{iv}/{token}", response_model=ApiResponse[MessageData])
def reset_password(
    iv: str,
    token: str,
    data: ResetPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
    action_tokens: ActionTokenService = Depends(get_action_token_service),
    email_service: EmailService = Depends(get_email_service),
) -> ApiResponse[MessageData]:
    """Set a new password from the emailed link and end any active session."""
    user_id = action_tokens.redeem(
        ActionToken(iv=iv, token=token), ActionTokenPurpose.RESET_PASSWORD
    )
    user = users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    user.password_hash = AuthService.hash_password(data.new_password)
    tokens.revoke(user)
    db.commit()

    background_tasks.add_task(email_service.send_password_changed_notification, user.email)

    logger.info(f"Password reset for user: {user.username}")
    return ApiResponse(
        data=MessageData(), message="Password reset successfully. Please log in."
    )
