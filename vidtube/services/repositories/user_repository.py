"""User data access layer."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from vidtube.errors import NotFoundError
from vidtube.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Centralized user data access."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def flush(self) -> None:
        self._db.flush()

    def find_by_id(self, user_id: str) -> User | None:
        """Find user by primary key."""
        return self._db.query(User).filter(User.id == user_id).first()

    def get_by_id(self, user_id: str) -> User:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def find_by_username(self, username: str) -> User | None:
        """Find user by username (case-insensitive)."""
        return (
            self._db.query(User)
            .filter(func.lower(User.username) == username.strip().lower())
            .first()
        )

    def find_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive)."""
        return (
            self._db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()
        )

    def find_by_identifier(self, identifier: str) -> User | None:
        """Find user whose username or email matches ``identifier``."""
        value = identifier.strip().lower()
        return (
            self._db.query(User)
            .filter(or_(func.lower(User.username) == value, func.lower(User.email) == value))
            .first()
        )

    def exists_with_username_or_email(self, username: str, email: str) -> bool:
        return (
            self._db.query(User.id)
            .filter(
                or_(
                    func.lower(User.username) == username.strip().lower(),
                    func.lower(User.email) == email.strip().lower(),
                )
            )
            .first()
            is not None
        )

    def create(self, **fields) -> User:
        user = User(**fields)
        self._db.add(user)
        self._db.flush()
        logger.info(f"Created user {user.username} with ID {user.id}")
        return user
