"""Tests for access/refresh token issuance, rotation and verification."""

from datetime import timedelta

import jwt
import pytest

from vidtube.errors import InvalidTokenError, UnauthenticatedError
from vidtube.models import User
from vidtube.services.auth_service import AuthService
from vidtube.services.repositories import UserRepository
from vidtube.services.token_service import TokenService


@pytest.fixture
def user(db):
    user = User(
        username="alice",
        email="alice@example.com",
        full_name="Alice",
        avatar="/media/avatars/a.png",
        password_hash=AuthService.hash_password("Password123"),
        is_verified=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def tokens(db, settings):
    return TokenService(settings, UserRepository(db))


class TestIssueTokenPair:
    def test_access_token_carries_display_identity(self, tokens, user, settings):
        pair = tokens.issue_token_pair(user)
        claims = jwt.decode(
            pair.access_token, settings.access_token_secret, algorithms=["HS256"]
        )

        assert claims["sub"] == user.id
        assert claims["email"] == "alice@example.com"
        assert claims["username"] == "alice"
        assert claims["full_name"] == "Alice"
        assert claims["type"] == "access"

    def test_refresh_token_signed_with_refresh_secret(self, tokens, user, settings):
        pair = tokens.issue_token_pair(user)

        claims = jwt.decode(
            pair.refresh_token, settings.refresh_token_secret, algorithms=["HS256"]
        )
        assert claims["sub"] == user.id
        assert claims["type"] == "refresh"
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(pair.refresh_token, settings.access_token_secret, algorithms=["HS256"])

    def test_stores_only_hash_of_refresh_token(self, tokens, user):
        pair = tokens.issue_token_pair(user)

        assert user.refresh_token_hash == AuthService.hash_token(pair.refresh_token)
        assert user.refresh_token_hash != pair.refresh_token

    def test_new_pair_supersedes_previous(self, tokens, user):
        first = tokens.issue_token_pair(user)
        second = tokens.issue_token_pair(user)

        assert first.refresh_token != second.refresh_token
        with pytest.raises(InvalidTokenError):
            tokens.rotate(first.refresh_token)


class TestRotate:
    def test_rotate_returns_fresh_pair(self, tokens, user):
        pair = tokens.issue_token_pair(user)

        rotated_user, new_pair = tokens.rotate(pair.refresh_token)

        assert rotated_user.id == user.id
        assert new_pair.refresh_token != pair.refresh_token

    def test_rotated_token_cannot_be_reused(self, tokens, user):
        pair = tokens.issue_token_pair(user)
        tokens.rotate(pair.refresh_token)

        with pytest.raises(InvalidTokenError):
            tokens.rotate(pair.refresh_token)

    def test_missing_token_is_unauthenticated(self, tokens):
        with pytest.raises(UnauthenticatedError) as exc_info:
            tokens.rotate(None)
        assert not isinstance(exc_info.value, InvalidTokenError)

    def test_garbage_token_is_invalid(self, tokens):
        with pytest.raises(InvalidTokenError):
            tokens.rotate("not.a.jwt")

    def test_expired_token_is_invalid(self, tokens, user):
        expired = tokens.create_refresh_token(user, expires_delta=timedelta(seconds=-1))
        user.refresh_token_hash = AuthService.hash_token(expired)

        with pytest.raises(InvalidTokenError):
            tokens.rotate(expired)

    def test_access_token_rejected_as_refresh(self, tokens, user):
        access = tokens.create_access_token(user)

        with pytest.raises(InvalidTokenError):
            tokens.rotate(access)

    def test_revoked_session_cannot_rotate(self, tokens, user):
        pair = tokens.issue_token_pair(user)
        tokens.revoke(user)

        assert user.refresh_token_hash is None
        with pytest.raises(InvalidTokenError):
            tokens.rotate(pair.refresh_token)


class TestVerifyAccess:
    def test_valid_token(self, tokens, user):
        claims = tokens.verify_access(tokens.create_access_token(user))

        assert claims["sub"] == user.id

    def test_missing_token(self, tokens):
        with pytest.raises(UnauthenticatedError, match="Unauthorized request"):
            tokens.verify_access(None)

    def test_expired_token(self, tokens, user):
        expired = tokens.create_access_token(user, expires_delta=timedelta(hours=-1))

        with pytest.raises(UnauthenticatedError, match="Invalid or expired"):
            tokens.verify_access(expired)

    def test_refresh_token_is_not_an_access_token(self, tokens, user):
        refresh = tokens.create_refresh_token(user)

        with pytest.raises(UnauthenticatedError):
            tokens.verify_access(refresh)

    def test_does_not_touch_stored_session(self, tokens, user):
        """Access checks are stateless: revoking the session leaves access tokens valid."""
        access = tokens.create_access_token(user)
        tokens.revoke(user)

        assert tokens.verify_access(access)["sub"] == user.id
