"""Integration tests for the likes router."""

from tests.helpers import API, create_user, upload_video


class TestVideoLikes:
    def test_toggle_reports_state(self, client):
        test_client, _ = client
        alice = create_user(test_client, "alice")
        bob = create_user(test_client, "bob")
        video = upload_video(test_client, alice["headers"])

        liked = test_client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob["headers"])
        unliked = test_client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob["headers"])

        assert liked.json()["data"] == {"liked": True}
        assert liked.json()["message"] == "Liked"
        assert unliked.json()["data"] == {"liked": False}
        assert unliked.json()["message"] == "Unliked"

    def test_like_count(self, client):
        test_client, _ = client
        alice = create_user(test_client, "alice")
        bob = create_user(test_client, "bob")
        video = upload_video(test_client, alice["headers"])
        for user in (alice, bob):
            test_client.post(f"{API}/likes/toggle/v/{video['id']}", headers=user["headers"])

        response = test_client.get(f"{API}/likes/count/{video['id']}")

        assert response.json()["data"] == {"videoId": video["id"], "likeCount": 2}

    def test_liked_videos(self, client):
        test_client, _ = client
        alice = create_user(test_client, "alice")
        bob = create_user(test_client, "bob")
        video = upload_video(test_client, alice["headers"])
        upload_video(test_client, alice["headers"], "not liked")
        test_client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob["headers"])

        response = test_client.get(f"{API}/likes/videos", headers=bob["headers"])

        assert [v["id"] for v in response.json()["data"]] == [video["id"]]

    def test_missing_video(self, client):
        test_client, _ = client
        alice = create_user(test_client, "alice")

        response = test_client.post(f"{API}/likes/toggle/v/missing", headers=alice["headers"])

        assert response.status_code == 404

    def test_requires_auth(self, client):
        test_client, _ = client

        assert test_client.post(f"{API}/likes/toggle/v/anything").status_code == 401


def test_tweet_likes(client):
    test_client, _ = client
    alice = create_user(test_client, "alice")
    bob = create_user(test_client, "bob")
    tweet = test_client.post(
        f"{API}/tweets", json={"content": "First!"}, headers=alice["headers"]
    ).json()["data"]

    liked = test_client.post(f"{API}/likes/toggle/t/{tweet['id']}", headers=bob["headers"])
    listed = test_client.get(f"{API}/likes/tweets", headers=bob["headers"])

    assert liked.json()["data"]["liked"] is True
    assert [t["content"] for t in listed.json()["data"]] == ["First!"]


def test_comment_likes(client):
    test_client, _ = client
    alice = create_user(test_client, "alice")
    video = upload_video(test_client, alice["headers"])
    comment = test_client.post(
        f"{API}/comments/{video['id']}", json={"content": "hi"}, headers=alice["headers"]
    ).json()["data"]

    liked = test_client.post(f"{API}/likes/toggle/c/{comment['id']}", headers=alice["headers"])
    listed = test_client.get(f"{API}/comments/{video['id']}")

    assert liked.json()["data"]["liked"] is True
    assert listed.json()["data"][0]["likeCount"] == 1
