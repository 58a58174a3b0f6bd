"""Schemas for account and token endpoints."""

import re

from pydantic import EmailStr, Field, field_validator, model_validator

from vidtube.schemas.common import APIModel
from vidtube.schemas.user import UserInfo

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


def _validate_password_strength(v: str) -> str:
    """Shared password validation logic."""
    errors = []
    if not re.search(r"[a-z]", v):
        errors.append("lowercase letter")
    if not re.search(r"[A-Z]", v):
        errors.append("uppercase letter")
    if not re.search(r"\d", v):
        errors.append("number")

    if errors:
        raise ValueError(f"Password must contain at least one: {', '.join(errors)}")
    return v


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Field cannot be empty")
    return v


class UserRegister(APIModel):
    """Schema for the text fields of a registration form."""

    full_name: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)

    @field_validator("full_name", "username", mode="before")
    @classmethod
    def strip_fields(cls, v: str) -> str:
        return _strip_required(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return _validate_password_strength(v)


class UserLogin(APIModel):
    """Schema for user login with either a username or an email."""

    username: str | None = None
    email: str | None = None
    password: str

    @model_validator(mode="after")
    def require_identifier(self) -> "UserLogin":
        if not (self.username or self.email):
            raise ValueError("Username or email is required")
        return self

    @property
    def identifier(self) -> str:
        return (self.username or self.email or "").strip().lower()


class TokenPair(APIModel):
    access_token: str
    refresh_token: str


class LoginData(TokenPair):
    """Payload returned by login."""

    user: UserInfo


class TokenRefresh(APIModel):
    """Schema for token refresh. The token may also come from a cookie."""

    refresh_token: str | None = None


class ChangePasswordRequest(APIModel):
    """Schema for changing password while logged in."""

    old_password: str
    new_password: str = Field(min_length=8, max_length=100)

    @field_validator("new_password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return _validate_password_strength(v)


class EmailRequest(APIModel):
    """Schema for resend-verification and forgot-password."""

    email: EmailStr


class ResetPasswordRequest(APIModel):
    """Schema for resetting password with an emailed link."""

    new_password: str = Field(min_length=8, max_length=100)

    @field_validator("new_password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return _validate_password_strength(v)


class ProfileUpdate(APIModel):
    """Text fields of a profile update; media arrive as files."""

    full_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
