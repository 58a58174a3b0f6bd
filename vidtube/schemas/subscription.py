"""Schemas for subscriptions."""

from datetime import datetime

from vidtube.schemas.common import APIModel
from vidtube.schemas.user import OwnerSummary


class SubscriptionState(APIModel):
    """Result of a subscription toggle: True when the edge now exists."""

    subscribed: bool


class SubscriptionEntry(APIModel):
    """The user on the other end of a subscription edge."""

    user: OwnerSummary
    subscribed_at: datetime | None = None
