"""Application exceptions.

Every failure a service or router reports is one of these. The handler
registered in ``vidtube.main`` turns them into the error envelope, so the
status code travels with the exception instead of being re-derived at each
call site.
"""

from fastapi import status


class AppError(Exception):
    """Base exception carrying a kind, a message and an HTTP status code."""

    kind = "Internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, errors: list[dict] | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(kind={self.kind}, message='{self.message}')>"


class BadRequestError(AppError):
    """Missing or invalid input."""

    kind = "BadRequest"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class UnauthenticatedError(AppError):
    """Missing, invalid or expired credentials, or an unverified account."""

    kind = "Unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class InvalidTokenError(UnauthenticatedError):
    """Refresh token is malformed, expired or superseded."""

    kind = "InvalidToken"
    default_message = "Invalid refresh token"


class ForbiddenError(AppError):
    """Authenticated but not the owner of the resource."""

    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to modify this resource"


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity_type: str, identifier: str | None = None):
        self.entity_type = entity_type
        self.identifier = identifier
        message = f"{entity_type} not found"
        if identifier is not None:
            message = f"{entity_type} not found: {identifier}"
        super().__init__(message)


class ConflictError(AppError):
    """Entity already exists (duplicate username, email, playlist entry)."""

    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class ActionTokenExpiredError(BadRequestError):
    """Action link redeemed after its window closed."""

    kind = "Expired"
    default_message = "This link has expired"


class ActionTokenInvalidError(BadRequestError):
    """Action link could not be decrypted, parsed or has the wrong purpose."""

    kind = "Invalid"
    default_message = "This link is invalid"


class InternalError(AppError):
    """Unexpected failure (storage, database)."""
