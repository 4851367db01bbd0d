"""Unit tests for TranscriptionService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from heirlooms.adapters.transcription.base import AbstractTranscriptionClient
from heirlooms.core.errors import TranscriptionAppError, ValidationAppError
from heirlooms.schemas.transcription import TranscriptionResponse
from heirlooms.services.transcription_service import (
    DEFAULT_AUDIO_FILENAME,
    FIELD_MAX_CHARS,
    TranscriptionService,
    _truncate,
)

AUDIO = b"\x1aE\xdf\xa3recorded-audio"


def _service(text: str = "A wedding photo from 1962") -> tuple[TranscriptionService, MagicMock]:
    client = MagicMock(spec=AbstractTranscriptionClient)
    client.transcribe = AsyncMock(return_value=text)
    return TranscriptionService(client=client), client


class TestTruncate:
    def test_no_cap(self) -> None:
        assert _truncate("x" * 5000, None) == ("x" * 5000, False)

    def test_exact_limit(self) -> None:
        assert _truncate("x" * 100, 100) == ("x" * 100, False)

    def test_over_limit(self) -> None:
        text, truncated = _truncate("x" * 150, 100)

        assert text == "x" * 100
        assert truncated is True


class TestTranscriptionService:
    @pytest.mark.asyncio
    async def test_returns_stripped_text(self) -> None:
        service, client = _service("  Grandma's recipe box  \n")

        result = await service.transcribe(AUDIO, content_type="audio/webm")

        assert isinstance(result, TranscriptionResponse)
        assert result.transcription == "Grandma's recipe box"
        assert result.char_count == len("Grandma's recipe box")
        assert result.truncated is False
        client.transcribe.assert_awaited_once_with(
            AUDIO,
            filename=DEFAULT_AUDIO_FILENAME,
            content_type="audio/webm",
            language=None,
        )

    @pytest.mark.asyncio
    async def test_title_is_capped(self) -> None:
        service, _ = _service("word " * 100)

        result = await service.transcribe(AUDIO, field_type="title")

        assert len(result.transcription) == FIELD_MAX_CHARS["title"]
        assert result.truncated is True
        assert result.field_type == "title"

    @pytest.mark.asyncio
    async def test_unknown_field_is_not_capped(self) -> None:
        service, _ = _service("y" * 4000)

        result = await service.transcribe(AUDIO, field_type="notes")

        assert result.char_count == 4000
        assert result.truncated is False

    @pytest.mark.asyncio
    async def test_passes_filename_and_language(self) -> None:
        service, client = _service()

        await service.transcribe(
            AUDIO, filename="memo.m4a", content_type="audio/mp4", language="de"
        )

        client.transcribe.assert_awaited_once_with(
            AUDIO, filename="memo.m4a", content_type="audio/mp4", language="de"
        )

    @pytest.mark.asyncio
    async def test_video_webm_content_type_accepted(self) -> None:
        service, _ = _service()

        result = await service.transcribe(AUDIO, content_type="video/webm")

        assert result.transcription

    @pytest.mark.asyncio
    async def test_empty_audio_rejected(self) -> None:
        service, client = _service()

        with pytest.raises(ValidationAppError) as exc_info:
            await service.transcribe(b"")

        assert exc_info.value.code == "audio_missing"
        client.transcribe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_audio_rejected(self) -> None:
        service, client = _service()

        with pytest.raises(ValidationAppError) as exc_info:
            await service.transcribe(AUDIO, content_type="application/pdf")

        assert exc_info.value.code == "audio_unsupported_type"
        assert exc_info.value.details == {"content_type": "application/pdf"}
        client.transcribe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self) -> None:
        service, client = _service()
        client.transcribe.side_effect = TranscriptionAppError(
            code="transcription_failed", message="boom"
        )

        with pytest.raises(TranscriptionAppError):
            await service.transcribe(AUDIO)
