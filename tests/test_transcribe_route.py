"""Endpoint tests for POST /v1/transcribe."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from heirlooms.adapters.transcription.base import AbstractTranscriptionClient
from heirlooms.api.routes.transcribe import get_transcription_service
from heirlooms.core.config import settings
from heirlooms.core.errors import TranscriptionAppError
from heirlooms.main import app
from heirlooms.services.transcription_service import TranscriptionService

WEBM = ("note.webm", b"\x1aE\xdf\xa3recorded-voice-note", "audio/webm")


@pytest.fixture
def provider() -> MagicMock:
    fake = MagicMock(spec=AbstractTranscriptionClient)
    fake.transcribe = AsyncMock(return_value="  Dad's army medal, 1944  ")
    return fake


@pytest.fixture
def client(provider: MagicMock) -> TestClient:
    app.dependency_overrides[get_transcription_service] = lambda: TranscriptionService(
        client=provider
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_transcribes_upload(client: TestClient, provider: MagicMock) -> None:
    response = client.post(
        "/v1/transcribe",
        files={"audio": WEBM},
        data={"field_type": "title", "language": "en"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "transcription": "Dad's army medal, 1944",
        "field_type": "title",
        "char_count": 22,
        "truncated": False,
    }
    provider.transcribe.assert_awaited_once_with(
        WEBM[1], filename="note.webm", content_type="audio/webm", language="en"
    )


def test_description_is_truncated(client: TestClient, provider: MagicMock) -> None:
    provider.transcribe.return_value = "a" * 3500

    response = client.post(
        "/v1/transcribe", files={"audio": WEBM}, data={"field_type": "description"}
    )

    data = response.json()
    assert data["char_count"] == 3000
    assert data["truncated"] is True


def test_missing_file_is_422(client: TestClient) -> None:
    response = client.post("/v1/transcribe", data={"field_type": "title"})

    assert response.status_code == 422


def test_empty_audio_is_400(client: TestClient) -> None:
    response = client.post("/v1/transcribe", files={"audio": ("note.webm", b"", "audio/webm")})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "audio_missing"


def test_non_audio_upload_is_400(client: TestClient) -> None:
    response = client.post(
        "/v1/transcribe", files={"audio": ("letter.pdf", b"%PDF-1.4", "application/pdf")}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "audio_unsupported_type"


def test_provider_failure_is_502(client: TestClient, provider: MagicMock) -> None:
    provider.transcribe.side_effect = TranscriptionAppError(
        code="transcription_failed",
        message="OpenAI transcription error: upstream timeout",
        details={"provider": "openai", "model": "whisper-1"},
    )

    response = client.post("/v1/transcribe", files={"audio": WEBM})

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "transcription_failed"


def test_oversized_upload_is_413(client: TestClient, provider: MagicMock) -> None:
    with patch.object(settings.app, "max_upload_size_mb", 1):
        response = client.post(
            "/v1/transcribe",
            files={"audio": ("long.webm", b"\x00" * (1024 * 1024 + 1), "audio/webm")},
        )

    assert response.status_code == 413
    assert "1.0MB" in response.json()["detail"]
    provider.transcribe.assert_not_awaited()


def test_rejected_uploads_still_count_against_limit(client: TestClient) -> None:
    for _ in range(10):
        client.post(
            "/v1/transcribe",
            files={"audio": ("note.webm", b"", "audio/webm")},
            headers={"X-Forwarded-For": "198.51.100.77"},
        )

    response = client.post(
        "/v1/transcribe",
        files={"audio": WEBM},
        headers={"X-Forwarded-For": "198.51.100.77"},
    )

    assert response.status_code == 429
