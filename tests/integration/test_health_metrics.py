"""
Integration Tests for Health, Metrics and Cross-Cutting Middleware
"""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from wellness.config import get_settings


class TestHealth:
    """Liveness, readiness and summary endpoints."""

    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness(self, client: TestClient) -> None:
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"

    def test_summary_degraded_without_llm(self, client: TestClient) -> None:
        """No provider keys: canned replies still work, so 200 but degraded."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["environment"] == "test"
        assert body["checks"]["llm"]["status"] == "degraded"

    def test_root(self, client: TestClient) -> None:
        body = client.get("/").json()

        assert body["name"] == "Wellness Companion API"
        assert body["status"] == "operational"


class TestMetrics:

    def test_metrics_exposed(self, client: TestClient, auth_headers: dict) -> None:
        client.post("/api/v1/chat/message", json={"message": "hello"}, headers=auth_headers)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert 'wellness_chat_messages_total{channel="rest"}' in response.text
        assert "wellness_http_requests_total" in response.text


class TestMiddleware:
    """Security headers, correlation ids and rate limiting."""

    def test_security_headers(self, client: TestClient) -> None:
        response = client.get("/health/live")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in response.headers

    def test_correlation_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health/live", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_correlation_id_generated(self, client: TestClient) -> None:
        response = client.get("/api/v1/auth/me")

        assert response.headers["X-Correlation-ID"]
        assert response.json()["correlation_id"] == response.headers["X-Correlation-ID"]

    def test_rate_limit_header(self, client: TestClient, auth_headers: dict) -> None:
        response = client.get("/api/v1/auth/me", headers=auth_headers)

        assert "X-RateLimit-Remaining" in response.headers


@pytest.fixture
def limited_client(monkeypatch) -> Iterator[TestClient]:
    """Application with a one-request auth budget."""
    monkeypatch.setenv("WELLNESS_RATE_LIMIT_AUTH_REQUESTS_PER_MINUTE", "1")
    monkeypatch.setenv("WELLNESS_RATE_LIMIT_BURST_SIZE", "0")
    get_settings.cache_clear()

    from wellness.main import create_application

    with TestClient(create_application()) as test_client:
        yield test_client


class TestRateLimiting:

    def test_auth_bucket_exhausted(self, limited_client: TestClient) -> None:
        payload = {"age": 18, "terms_accepted": True}

        first = limited_client.post("/api/v1/auth/register", json=payload)
        second = limited_client.post("/api/v1/auth/register", json=payload)

        assert first.status_code == 201
        assert second.status_code == 429
        assert second.json()["code"] == "RATE_LIMITED"
        assert int(second.headers["Retry-After"]) >= 1

    def test_health_never_limited(self, limited_client: TestClient) -> None:
        statuses = {limited_client.get("/health/live").status_code for _ in range(5)}

        assert statuses == {200}


@pytest.fixture
def chat_limited_client(monkeypatch) -> Iterator[TestClient]:
    """Application allowing one chat request per client per minute."""
    monkeypatch.setenv("WELLNESS_RATE_LIMIT_CHAT_REQUESTS_PER_MINUTE", "1")
    monkeypatch.setenv("WELLNESS_RATE_LIMIT_BURST_SIZE", "0")
    get_settings.cache_clear()

    from wellness.main import create_application

    with TestClient(create_application()) as test_client:
        yield test_client


def _bearer(client: TestClient) -> dict:
    body = client.post("/api/v1/auth/register", json={"age": 18, "terms_accepted": True}).json()
    return {"Authorization": f"Bearer {body['tokens']['access_token']}"}


class TestChatRateLimitKeys:
    """Chat buckets follow the authenticated user, not the address."""

    def test_users_behind_one_address_limited_separately(self, chat_limited_client: TestClient) -> None:
        first_user = _bearer(chat_limited_client)
        second_user = _bearer(chat_limited_client)

        allowed = chat_limited_client.get("/api/v1/chat/sessions", headers=first_user)
        limited = chat_limited_client.get("/api/v1/chat/sessions", headers=first_user)
        other = chat_limited_client.get("/api/v1/chat/sessions", headers=second_user)

        assert allowed.status_code == 200
        assert limited.status_code == 429
        assert other.status_code == 200

    def test_invalid_token_limited_by_address(self, chat_limited_client: TestClient) -> None:
        headers = {"Authorization": "Bearer not-a-token"}

        first = chat_limited_client.get("/api/v1/chat/sessions", headers=headers)
        second = chat_limited_client.get("/api/v1/chat/sessions", headers=headers)

        assert first.status_code == 401
        assert second.status_code == 429
