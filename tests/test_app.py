"""Tests for app-wide behaviour: health, error envelopes, rate limiting."""

from tests.helpers import API
from vidtube.rate_limiter import limiter


def test_health(client):
    test_client, _ = client

    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_unknown_route_uses_error_envelope(client):
    test_client, _ = client

    response = test_client.get(f"{API}/nothing-here")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["kind"] == "NotFound"
    assert body["data"] is None
    assert body["statusCode"] == 404


def test_validation_errors_are_bad_requests(client):
    test_client, _ = client

    response = test_client.post(f"{API}/users/forgot-password", json={"email": "not-an-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "BadRequest"
    assert body["errors"][0]["field"] == "email"


def test_missing_token_is_unauthenticated(client):
    test_client, _ = client

    response = test_client.get(f"{API}/users/current-user")

    assert response.status_code == 401
    assert response.json()["kind"] == "Unauthenticated"


def test_rate_limit(client):
    test_client, _ = client
    limiter.enabled = True

    responses = [
        test_client.post(f"{API}/users/forgot-password", json={"email": "nobody@example.com"})
        for _ in range(4)
    ]

    assert [r.status_code for r in responses[:3]] == [200, 200, 200]
    assert responses[3].status_code == 429
    assert responses[3].json()["kind"] == "TooManyRequests"
