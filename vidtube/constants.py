"""Application constants to avoid magic strings."""


class ActionTokenPurpose:
    """What an emailed action link is allowed to do."""

    VERIFY_EMAIL = "verify_email"
    RESET_PASSWORD = "reset_password"


class MediaFolder:
    """Folders under the media root."""

    AVATARS = "avatars"
    COVER_IMAGES = "cover-images"
    VIDEOS = "videos"
    THUMBNAILS = "thumbnails"


class TokenType:
    """JWT ``type`` claim values."""

    ACCESS = "access"
    REFRESH = "refresh"


class CookieName:
    ACCESS_TOKEN = "access_token"
    REFRESH_TOKEN = "refresh_token"


# Columns a video listing may be sorted by
VIDEO_SORT_FIELDS = ("created_at", "views", "duration", "title")

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100
