"""Helpers for owner-gated mutations."""

from sqlalchemy.orm import Session

from vidtube.errors import ForbiddenError, NotFoundError
from vidtube.models.user import User


def get_or_404(db: Session, model: type, entity_id: str, entity_name: str | None = None):
    """Load ``model`` by primary key or raise NotFoundError."""
    entity = db.get(model, entity_id)
    if entity is None:
        raise NotFoundError(entity_name or model.__name__, entity_id)
    return entity


def ensure_owner(entity, user: User, action: str = "modify") -> None:
    """Raise ForbiddenError unless ``user`` owns ``entity``."""
    if entity.owner_id != user.id:
        raise ForbiddenError(f"Only the owner can {action} this {type(entity).__name__.lower()}")


def get_owned_or_403(
    db: Session, model: type, entity_id: str, user: User, action: str = "modify"
):
    """Load an entity and check ownership: NotFound first, then Forbidden."""
    entity = get_or_404(db, model, entity_id)
    ensure_owner(entity, user, action)
    return entity
