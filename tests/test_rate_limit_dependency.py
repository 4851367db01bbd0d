"""Tests for the HTTP rate limit dependency and process-wide limiter."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from heirlooms.adapters.transcription.base import AbstractTranscriptionClient
from heirlooms.api.routes.transcribe import get_transcription_service
from heirlooms.core import rate_limit
from heirlooms.core.config import settings
from heirlooms.main import app
from heirlooms.services.transcription_service import TranscriptionService


@pytest.fixture
def client() -> TestClient:
    fake_client = MagicMock(spec=AbstractTranscriptionClient)
    fake_client.transcribe = AsyncMock(return_value="hello")
    app.dependency_overrides[get_transcription_service] = lambda: TranscriptionService(
        client=fake_client
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def _post_audio(client: TestClient, forwarded_for: str | None = None):
    headers = {"X-Forwarded-For": forwarded_for} if forwarded_for else {}
    return client.post(
        "/v1/transcribe",
        files={"audio": ("note.webm", b"\x1aE\xdf\xa3audio", "audio/webm")},
        headers=headers,
    )


def _request_with(headers: dict[str, str], client_host: str | None = "10.0.0.9"):
    request = MagicMock()
    request.headers = headers
    request.client = MagicMock(host=client_host) if client_host else None
    return request


class TestClientKey:
    def test_uses_first_forwarded_address(self) -> None:
        request = _request_with({"x-forwarded-for": " 203.0.113.7 , 10.0.0.1"})
        assert rate_limit.client_key_from_request(request) == "203.0.113.7"

    def test_falls_back_to_peer_host(self) -> None:
        assert rate_limit.client_key_from_request(_request_with({})) == "10.0.0.9"

    def test_blank_forwarded_header_falls_back(self) -> None:
        request = _request_with({"x-forwarded-for": " , 10.0.0.1"})
        assert rate_limit.client_key_from_request(request) == "10.0.0.9"

    def test_unknown_when_nothing_available(self) -> None:
        request = _request_with({}, client_host=None)
        assert rate_limit.client_key_from_request(request) == "unknown"


class TestCheckRateLimit:
    def test_default_limit_is_ten_per_minute(self) -> None:
        results = [rate_limit.check_rate_limit("198.51.100.1") for _ in range(11)]

        assert [r.ok for r in results] == [True] * 10 + [False]
        assert 0 < results[-1].retry_after_ms <= 60_000

    def test_limiter_is_shared_across_calls(self) -> None:
        assert rate_limit.get_rate_limiter() is rate_limit.get_rate_limiter()

    def test_limiter_rebuilt_when_settings_change(self) -> None:
        original = rate_limit.get_rate_limiter()
        with patch.object(settings.app, "rate_limit_requests", 3):
            rebuilt = rate_limit.get_rate_limiter()
            assert rebuilt is not original
            assert rebuilt.limit == 3
        rate_limit.get_rate_limiter()


class TestEnforceRateLimit:
    def test_eleventh_request_gets_429(self, client: TestClient) -> None:
        for _ in range(10):
            assert _post_audio(client, "203.0.113.10").status_code == 200

        response = _post_audio(client, "203.0.113.10")

        assert response.status_code == 429
        assert response.json()["detail"] == "Too Many Requests"
        assert 1 <= int(response.headers["Retry-After"]) <= 60
        assert response.headers["X-RateLimit-Limit"] == "10"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_clients_are_limited_independently(self, client: TestClient) -> None:
        for _ in range(10):
            _post_audio(client, "203.0.113.20")
        assert _post_audio(client, "203.0.113.20").status_code == 429

        assert _post_audio(client, "203.0.113.21").status_code == 200

    def test_headers_can_be_disabled(self, client: TestClient) -> None:
        with patch.object(settings.app, "rate_limit_include_headers", False):
            for _ in range(10):
                _post_audio(client, "203.0.113.30")
            response = _post_audio(client, "203.0.113.30")

        assert response.status_code == 429
        assert "Retry-After" not in response.headers

    def test_disabled_limiter_never_blocks(self, client: TestClient) -> None:
        with patch.object(settings.app, "rate_limit_enabled", False):
            statuses = {_post_audio(client, "203.0.113.40").status_code for _ in range(15)}

        assert statuses == {200}

    def test_media_routes_are_not_rate_limited(self, client: TestClient) -> None:
        for _ in range(15):
            response = client.post("/v1/media/normalize", json={"urls": ["a.jpg"]})
            assert response.status_code == 200
