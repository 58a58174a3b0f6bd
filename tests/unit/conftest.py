"""Factories for unit tests that work directly on the database session."""

import pytest

from vidtube.models import Subscription, User, Video


@pytest.fixture
def make_user(db):
    def _make_user(username: str, **overrides) -> User:
        fields = {
            "username": username,
            "email": f"{username}@example.com",
            "full_name": username.title(),
            "avatar": f"/media/avatars/{username}.png",
            "password_hash": "not-a-real-hash",
            "is_verified": True,
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        db.flush()
        return user

    return _make_user


@pytest.fixture
def make_video(db):
    def _make_video(owner: User, title: str = "Video", **overrides) -> Video:
        fields = {
            "title": title,
            "description": f"About {title}",
            "video_file": f"/media/videos/{title}.mp4",
            "thumbnail": f"/media/thumbnails/{title}.png",
            "is_published": True,
            "owner_id": owner.id,
        }
        fields.update(overrides)
        video = Video(**fields)
        db.add(video)
        db.flush()
        return video

    return _make_video


@pytest.fixture
def subscribe(db):
    def _subscribe(subscriber: User, channel: User) -> Subscription:
        edge = Subscription(subscriber_id=subscriber.id, channel_id=channel.id)
        db.add(edge)
        db.flush()
        return edge

    return _subscribe
