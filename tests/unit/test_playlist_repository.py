"""Tests for ordered playlist membership."""

import pytest
from sqlalchemy import select

from vidtube.errors import NotFoundError
from vidtube.models import Playlist, playlist_videos
from vidtube.services.repositories import PlaylistRepository


@pytest.fixture
def playlists(db):
    return PlaylistRepository(db)


@pytest.fixture
def make_playlist(db):
    def _make_playlist(owner, name: str = "Mix") -> Playlist:
        playlist = Playlist(name=name, owner_id=owner.id)
        db.add(playlist)
        db.flush()
        return playlist

    return _make_playlist


def _positions(db, playlist_id: str) -> list[tuple[str, int]]:
    rows = db.execute(
        select(playlist_videos.c.video_id, playlist_videos.c.position)
        .where(playlist_videos.c.playlist_id == playlist_id)
        .order_by(playlist_videos.c.position)
    ).all()
    return [tuple(row) for row in rows]


def test_append_numbers_from_zero(playlists, db, make_user, make_video, make_playlist):
    owner = make_user("owner")
    playlist = make_playlist(owner)
    first, second = make_video(owner, "first"), make_video(owner, "second")

    assert playlists.append_video(playlist.id, first.id) == 0
    assert playlists.append_video(playlist.id, second.id) == 1
    assert playlists.position_of(playlist.id, second.id) == 1
    assert playlists.position_of(playlist.id, "missing") is None


def test_remove_closes_gap(playlists, db, make_user, make_video, make_playlist):
    owner = make_user("owner")
    playlist = make_playlist(owner)
    videos = [make_video(owner, f"v{i}") for i in range(3)]
    for video in videos:
        playlists.append_video(playlist.id, video.id)

    assert playlists.remove_video(playlist.id, videos[0].id) is True
    assert playlists.remove_video(playlist.id, videos[0].id) is False
    assert _positions(db, playlist.id) == [(videos[1].id, 0), (videos[2].id, 1)]


def test_remove_video_everywhere(playlists, db, make_user, make_video, make_playlist):
    owner = make_user("owner")
    mix, favourites = make_playlist(owner, "Mix"), make_playlist(owner, "Favourites")
    gone, kept = make_video(owner, "gone"), make_video(owner, "kept")
    playlists.append_video(mix.id, gone.id)
    playlists.append_video(mix.id, kept.id)
    playlists.append_video(favourites.id, kept.id)
    playlists.append_video(favourites.id, gone.id)

    assert playlists.remove_video_everywhere(gone.id) == 2
    assert _positions(db, mix.id) == [(kept.id, 0)]
    assert _positions(db, favourites.id) == [(kept.id, 0)]


def test_get_missing_playlist(playlists):
    with pytest.raises(NotFoundError):
        playlists.get_by_id("missing")
