"""Access and refresh token lifecycle.

Access tokens are stateless JWTs checked by signature and expiry only.
Refresh tokens are JWTs signed with a separate secret whose SHA-256 is stored
on the user row; only the most recently issued one is accepted, so a
superseded token is rejected on reuse.
"""

import logging
import secrets
from datetime import UTC, datetime, timedelta

import jwt

from vidtube.config import Settings
from vidtube.constants import TokenType
from vidtube.errors import InvalidTokenError, UnauthenticatedError
from vidtube.models.user import User
from vidtube.schemas.auth import TokenPair
from vidtube.services.auth_service import AuthService
from vidtube.services.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class TokenService:
    """Issues, rotates and verifies session tokens."""

    def __init__(self, settings: Settings, users: UserRepository) -> None:
        self._settings = settings
        self._users = users

    def create_access_token(self, user: User, expires_delta: timedelta | None = None) -> str:
        """Create a JWT access token carrying the user's display identity."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=self._settings.access_token_expire_minutes)

        now = datetime.now(UTC)
        payload = {
            "sub": user.id,
            "email": user.email,
            "username": user.username,
            "full_name": user.full_name,
            "type": TokenType.ACCESS,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(
            payload, self._settings.access_token_secret, algorithm=self._settings.jwt_algorithm
        )

    def create_refresh_token(self, user: User, expires_delta: timedelta | None = None) -> str:
        """Create a JWT refresh token. ``jti`` makes every token distinct."""
        if expires_delta is None:
            expires_delta = timedelta(days=self._settings.refresh_token_expire_days)

        now = datetime.now(UTC)
        payload = {
            "sub": user.id,
            "type": TokenType.REFRESH,
            "jti": secrets.token_hex(16),
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(
            payload, self._settings.refresh_token_secret, algorithm=self._settings.jwt_algorithm
        )

    def issue_token_pair(self, user: User) -> TokenPair:
        """Create both tokens and make the new refresh token the only valid one."""
        access_token = self.create_access_token(user)
        refresh_token = self.create_refresh_token(user)
        user.refresh_token_hash = AuthService.hash_token(refresh_token)
        self._users.flush()
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def rotate(self, refresh_token: str | None) -> tuple[User, TokenPair]:
        """Exchange a refresh token for a fresh pair.

        Raises:
            UnauthenticatedError: No token was presented.
            InvalidTokenError: Bad signature, expired, wrong type, unknown user,
                or not the token currently stored for the user.
        """
        if not refresh_token:
            raise UnauthenticatedError("Refresh token is required")

        payload = self._decode(refresh_token, self._settings.refresh_token_secret)
        if payload is None or payload.get("type") != TokenType.REFRESH:
            raise InvalidTokenError("Invalid refresh token")

        user = self._users.find_by_id(payload.get("sub", ""))
        if user is None:
            raise InvalidTokenError("Invalid refresh token")

        if not AuthService.verify_token_hash(refresh_token, user.refresh_token_hash):
            logger.warning(f"Refresh token reuse rejected for user {user.id}")
            raise InvalidTokenError("Refresh token is expired or used")

        return user, self.issue_token_pair(user)

    def verify_access(self, token: str | None) -> dict:
        """Validate an access token by signature and expiry only.

        Returns:
            The decoded claims.
        """
        if not token:
            raise UnauthenticatedError("Unauthorized request")

        payload = self._decode(token, self._settings.access_token_secret)
        if payload is None or payload.get("type") != TokenType.ACCESS:
            raise UnauthenticatedError("Invalid or expired access token")
        return payload

    def revoke(self, user: User) -> None:
        """Forget the stored refresh token so no refresh succeeds until next login."""
        user.refresh_token_hash = None
        self._users.flush()

    def _decode(self, token: str, secret: str) -> dict | None:
        try:
            return jwt.decode(token, secret, algorithms=[self._settings.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            logger.debug("Token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            return None
