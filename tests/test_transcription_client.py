"""Integration tests for the transcription adapter layer."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from heirlooms.adapters.transcription import (
    OpenAITranscriptionClient,
    create_transcription_client,
)
from heirlooms.core.config import settings
from heirlooms.core.errors import TranscriptionAppError, ValidationAppError

AUDIO = b"\x1aE\xdf\xa3voice"


class TestOpenAITranscriptionClient:
    """OpenAI client with the SDK call mocked out."""

    @pytest.mark.asyncio
    async def test_transcribe_success(self) -> None:
        client = OpenAITranscriptionClient(api_key="test-key-123", model="whisper-1")

        with patch.object(
            client.client.audio.transcriptions,
            "create",
            new_callable=AsyncMock,
            return_value=MagicMock(text="Uncle Joe's pocket watch"),
        ) as mock_create:
            result = await client.transcribe(
                AUDIO, filename="note.webm", content_type="audio/webm"
            )

        assert result == "Uncle Joe's pocket watch"
        call_kwargs = mock_create.call_args.kwargs
        assert call_kwargs["model"] == "whisper-1"
        assert call_kwargs["file"] == ("note.webm", AUDIO, "audio/webm")
        assert "language" not in call_kwargs

    @pytest.mark.asyncio
    async def test_language_hint_forwarded(self) -> None:
        client = OpenAITranscriptionClient(api_key="test-key")

        with patch.object(
            client.client.audio.transcriptions,
            "create",
            new_callable=AsyncMock,
            return_value=MagicMock(text="hallo"),
        ) as mock_create:
            await client.transcribe(AUDIO, filename="note.m4a", language="de")

        call_kwargs = mock_create.call_args.kwargs
        assert call_kwargs["language"] == "de"
        assert call_kwargs["file"] == ("note.m4a", AUDIO)

    @pytest.mark.asyncio
    async def test_empty_text_returns_empty_string(self) -> None:
        client = OpenAITranscriptionClient(api_key="test-key")

        with patch.object(
            client.client.audio.transcriptions,
            "create",
            new_callable=AsyncMock,
            return_value=MagicMock(text=None),
        ):
            result = await client.transcribe(AUDIO, filename="silence.webm")

        assert result == ""

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self) -> None:
        client = OpenAITranscriptionClient(api_key="test-key", model="whisper-1")

        with patch.object(
            client.client.audio.transcriptions,
            "create",
            new_callable=AsyncMock,
            side_effect=RuntimeError("connection reset"),
        ):
            with pytest.raises(TranscriptionAppError) as exc_info:
                await client.transcribe(AUDIO, filename="note.webm")

        assert exc_info.value.code == "transcription_failed"
        assert "connection reset" in exc_info.value.message
        assert exc_info.value.details == {"provider": "openai", "model": "whisper-1"}


class TestTranscriptionClientFactory:
    def test_creates_openai_client(self) -> None:
        client = create_transcription_client()

        assert isinstance(client, OpenAITranscriptionClient)
        assert client.model == settings.transcription.model

    def test_missing_api_key(self) -> None:
        with patch.object(settings.transcription, "api_key", None):
            with pytest.raises(ValidationAppError) as exc_info:
                create_transcription_client()

        assert exc_info.value.code == "transcription_missing_api_key"

    def test_unknown_provider(self) -> None:
        with patch.object(settings.transcription, "provider", "acme"):
            with pytest.raises(ValidationAppError) as exc_info:
                create_transcription_client()

        assert exc_info.value.code == "transcription_unknown_provider"
        assert "acme" in exc_info.value.message
