"""Authentication dependencies for protected routes.

A request is authenticated when it carries a valid access token, either in
the ``access_token`` cookie or as an ``Authorization: Bearer`` header.
Nothing is stored server side for this check.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vidtube.constants import CookieName
from vidtube.dependencies.services import get_token_service, get_user_repository
from vidtube.errors import UnauthenticatedError
from vidtube.models.user import User
from vidtube.services.repositories import UserRepository
from vidtube.services.token_service import TokenService

security = HTTPBearer(auto_error=False)


def _extract_access_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    token = request.cookies.get(CookieName.ACCESS_TOKEN)
    if not token and credentials:
        token = credentials.credentials
    return token


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    tokens: TokenService = Depends(get_token_service),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Get current authenticated user from the access token.

    Usage:
        @router.get("/protected")
        def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    payload = tokens.verify_access(_extract_access_token(request, credentials))

    user = users.find_by_id(payload.get("sub", ""))
    if user is None:
        raise UnauthenticatedError("Invalid access token")
    return user


def get_current_user_optional(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    tokens: TokenService = Depends(get_token_service),
    users: UserRepository = Depends(get_user_repository),
) -> User | None:
    """
    Get current user if authenticated, None otherwise.
    Useful for routes that work with or without authentication.
    """
    if not _extract_access_token(request, credentials):
        return None

    try:
        return get_current_user(request, credentials, tokens, users)
    except UnauthenticatedError:
        return None
