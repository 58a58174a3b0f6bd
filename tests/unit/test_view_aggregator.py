"""Tests for the joined read models (channel profile, history, stats...)."""

import pytest

from vidtube.errors import NotFoundError
from vidtube.models import Comment, Like, Playlist, Tweet, playlist_videos
from vidtube.services.view_aggregator import ViewAggregator


@pytest.fixture
def views(db):
    return ViewAggregator(db)


class TestChannelProfile:
    def test_counts_and_viewer_flag(self, views, make_user, subscribe):
        """3 subscribers and 2 subscriptions, seen by a subscriber and a stranger."""
        channel = make_user("channel")
        fans = [make_user(f"fan{i}") for i in range(3)]
        followed = [make_user(f"other{i}") for i in range(2)]
        stranger = make_user("stranger")
        for fan in fans:
            subscribe(fan, channel)
        for other in followed:
            subscribe(channel, other)

        as_fan = views.channel_profile("channel", viewer_id=fans[0].id)
        as_stranger = views.channel_profile("channel", viewer_id=stranger.id)
        anonymous = views.channel_profile("channel")

        assert as_fan.subscriber_count == 3
        assert as_fan.channel_subscribed_to_count == 2
        assert as_fan.is_subscribed is True
        assert as_stranger.is_subscribed is False
        assert anonymous.is_subscribed is False

    def test_channel_followed_by_viewer_is_not_subscribed(self, views, make_user, subscribe):
        """The viewer being followed BY the channel does not count."""
        channel = make_user("channel")
        viewer = make_user("viewer")
        subscribe(channel, viewer)

        profile = views.channel_profile("channel", viewer_id=viewer.id)

        assert profile.is_subscribed is False
        assert profile.subscriber_count == 0

    def test_lookup_is_case_insensitive(self, views, make_user):
        make_user("channel")

        assert views.channel_profile("  CHANNEL ").username == "channel"

    def test_unknown_username(self, views):
        with pytest.raises(NotFoundError):
            views.channel_profile("nobody")


class TestWatchHistory:
    def test_history_order_with_owner_summary(self, views, db, make_user, make_video):
        owner = make_user("owner")
        viewer = make_user("viewer")
        first = make_video(owner, "first")
        second = make_video(owner, "second")
        viewer.watch_history = [second.id, first.id]
        db.flush()

        history = views.watch_history(viewer.id)

        assert [v.id for v in history] == [second.id, first.id]
        assert history[0].owner.username == "owner"
        assert history[0].owner.avatar == "/media/avatars/owner.png"

    def test_deleted_videos_skipped(self, views, db, make_user, make_video):
        owner = make_user("owner")
        kept = make_video(owner, "kept")
        viewer = make_user("viewer", watch_history=["gone-video-id", kept.id])
        db.flush()

        assert [v.id for v in views.watch_history(viewer.id)] == [kept.id]

    def test_empty_history(self, views, make_user):
        assert views.watch_history(make_user("viewer").id) == []


class TestChannelStats:
    def test_channel_without_anything_is_all_zero(self, views, make_user):
        stats = views.channel_stats(make_user("empty").id)

        assert stats.total_videos == 0
        assert stats.total_views == 0
        assert stats.total_subscribers == 0
        assert stats.total_likes == 0

    def test_totals(self, views, db, make_user, make_video, subscribe):
        channel = make_user("channel")
        fan = make_user("fan")
        other = make_user("other")
        first = make_video(channel, "first", views=10)
        second = make_video(channel, "second", views=5, is_published=False)
        make_video(other, "unrelated", views=100)
        subscribe(fan, channel)
        subscribe(other, channel)
        db.add_all(
            [
                Like(video_id=first.id, liked_by_id=fan.id),
                Like(video_id=first.id, liked_by_id=other.id),
                Like(video_id=second.id, liked_by_id=fan.id),
            ]
        )
        db.flush()

        stats = views.channel_stats(channel.id)

        assert stats.total_videos == 2
        assert stats.total_views == 15
        assert stats.total_subscribers == 2
        assert stats.total_likes == 3

    def test_videos_without_subscribers(self, views, make_user, make_video):
        channel = make_user("channel")
        make_video(channel, "solo", views=3)

        stats = views.channel_stats(channel.id)

        assert stats.total_videos == 1
        assert stats.total_views == 3
        assert stats.total_subscribers == 0
        assert stats.total_likes == 0


class TestEngagementViews:
    def test_video_comments_with_like_counts(self, views, db, make_user, make_video):
        owner = make_user("owner")
        fan = make_user("fan")
        video = make_video(owner)
        comment = Comment(content="Nice", video_id=video.id, owner_id=fan.id)
        db.add(comment)
        db.flush()
        db.add(Like(comment_id=comment.id, liked_by_id=owner.id))
        db.flush()

        comments = views.video_comments(video.id, page=1, limit=10)

        assert len(comments) == 1
        assert comments[0].owner.username == "fan"
        assert comments[0].like_count == 1

    def test_video_comments_unknown_video(self, views):
        with pytest.raises(NotFoundError):
            views.video_comments("missing", page=1, limit=10)

    def test_video_like_count(self, views, db, make_user, make_video):
        owner = make_user("owner")
        video = make_video(owner)
        assert views.video_like_count(video.id) == 0

        db.add(Like(video_id=video.id, liked_by_id=owner.id))
        db.flush()

        assert views.video_like_count(video.id) == 1

    def test_liked_videos_hide_others_unpublished(self, views, db, make_user, make_video):
        owner = make_user("owner")
        fan = make_user("fan")
        public = make_video(owner, "public")
        hidden = make_video(owner, "hidden", is_published=False)
        db.add_all(
            [
                Like(video_id=public.id, liked_by_id=fan.id),
                Like(video_id=hidden.id, liked_by_id=fan.id),
                Like(video_id=hidden.id, liked_by_id=owner.id),
            ]
        )
        db.flush()

        assert [v.id for v in views.liked_videos(fan.id)] == [public.id]
        assert [v.id for v in views.liked_videos(owner.id)] == [hidden.id]

    def test_user_tweets_and_liked_tweets(self, views, db, make_user):
        author = make_user("author")
        fan = make_user("fan")
        tweet = Tweet(content="hello", owner_id=author.id)
        db.add(tweet)
        db.flush()
        db.add(Like(tweet_id=tweet.id, liked_by_id=fan.id))
        db.flush()

        tweets = views.user_tweets(author.id)

        assert [(t.content, t.like_count) for t in tweets] == [("hello", 1)]
        assert [t.id for t in views.liked_tweets(fan.id)] == [tweet.id]

    def test_subscribers_and_subscriptions(self, views, make_user, subscribe):
        channel = make_user("channel")
        fan = make_user("fan")
        subscribe(fan, channel)

        assert [e.user.username for e in views.channel_subscribers(channel.id)] == ["fan"]
        assert [e.user.username for e in views.subscribed_channels(fan.id)] == ["channel"]
        assert views.subscribed_channels(channel.id) == []


def test_user_playlists_keep_position_order(views, db, make_user, make_video):
    owner = make_user("owner")
    first = make_video(owner, "first")
    second = make_video(owner, "second")
    playlist = Playlist(name="Mix", owner_id=owner.id)
    db.add(playlist)
    db.flush()
    db.execute(
        playlist_videos.insert(),
        [
            {"playlist_id": playlist.id, "video_id": second.id, "position": 0},
            {"playlist_id": playlist.id, "video_id": first.id, "position": 1},
        ],
    )
    db.flush()

    playlists = views.user_playlists(owner.id)

    assert [p.name for p in playlists] == ["Mix"]
    assert [v.title for v in playlists[0].videos] == ["second", "first"]


def test_user_playlists_hide_other_channels_drafts(views, db, make_user, make_video):
    owner = make_user("owner")
    curator = make_user("curator")
    public = make_video(owner, "public")
    draft = make_video(owner, "draft", is_published=False)
    playlist = Playlist(name="Mix", owner_id=curator.id)
    db.add(playlist)
    db.flush()
    db.execute(
        playlist_videos.insert(),
        [
            {"playlist_id": playlist.id, "video_id": draft.id, "position": 0},
            {"playlist_id": playlist.id, "video_id": public.id, "position": 1},
        ],
    )
    db.flush()

    anonymous = views.user_playlists(curator.id)
    as_owner = views.user_playlists(curator.id, viewer_id=owner.id)

    assert [v.title for v in anonymous[0].videos] == ["public"]
    assert [v.title for v in as_owner[0].videos] == ["draft", "public"]


def test_watch_history_skips_other_channels_drafts(views, db, make_user, make_video):
    owner = make_user("owner")
    viewer = make_user("viewer")
    draft = make_video(owner, "draft", is_published=False)
    owner.watch_history = [draft.id]
    viewer.watch_history = [draft.id]
    db.flush()

    assert views.watch_history(viewer.id) == []
    assert [v.id for v in views.watch_history(owner.id)] == [draft.id]
