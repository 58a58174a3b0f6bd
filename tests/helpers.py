"""Helpers for driving the API in tests."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from vidtube.services.action_token_service import ActionToken

API = "/api/v1"
PASSWORD = "Password123"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 256


def register_user(
    test_client: TestClient,
    username: str,
    email: str | None = None,
    password: str = PASSWORD,
    full_name: str | None = None,
    with_cover: bool = False,
):
    """Register through the API. Returns (response, verification token or None)."""
    files = {"avatar": ("avatar.png", PNG_BYTES, "image/png")}
    if with_cover:
        files["cover_image"] = ("cover.png", PNG_BYTES, "image/png")

    with patch(
        "vidtube.services.email_service.EmailService.send_verification_email"
    ) as mock_send:
        response = test_client.post(
            f"{API}/users/register",
            data={
                "full_name": full_name or username.title(),
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
            files=files,
        )

    token = mock_send.call_args.args[1] if mock_send.called else None
    return response, token


def verify_user(test_client: TestClient, token: ActionToken):
    with patch("vidtube.services.email_service.EmailService.send_welcome_email"):
        return test_client.get(f"{API}/users/verify/{token.iv}/{token.token}")


def login(test_client: TestClient, identifier: str, password: str = PASSWORD) -> dict:
    """Log in and return the response body's data.

    Cookies set by login are dropped so each test request authenticates only
    with the headers it passes explicitly.
    """
    response = test_client.post(
        f"{API}/users/login", json={"username": identifier, "password": password}
    )
    assert response.status_code == 200, response.text
    test_client.cookies.clear()
    return response.json()["data"]


def auth_headers(access_token: str) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


def create_user(test_client: TestClient, username: str) -> dict:
    """Register, verify and log in a user.

    Returns:
        {"id", "username", "headers", "access_token", "refresh_token"}
    """
    response, token = register_user(test_client, username)
    assert response.status_code == 201, response.text
    verify_user(test_client, token)
    data = login(test_client, username)
    return {
        "id": data["user"]["id"],
        "username": username,
        "headers": auth_headers(data["accessToken"]),
        "access_token": data["accessToken"],
        "refresh_token": data["refreshToken"],
    }


def upload_video(
    test_client: TestClient, headers: dict, title: str = "My video", publish: bool = True
) -> dict:
    """Upload a video and optionally publish it. Returns the video data."""
    response = test_client.post(
        f"{API}/videos",
        data={"title": title, "description": f"About {title}"},
        files={
            "video_file": ("clip.mp4", MP4_BYTES, "video/mp4"),
            "thumbnail": ("thumb.png", PNG_BYTES, "image/png"),
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    video = response.json()["data"]
    if publish:
        toggled = test_client.patch(
            f"{API}/videos/{video['id']}/toggle-publish", headers=headers
        )
        assert toggled.status_code == 200, toggled.text
        video = {**video, "isPublished": True}
    return video
