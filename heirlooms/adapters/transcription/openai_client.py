"""OpenAI transcription client adapter."""

from typing import Any

from openai import AsyncOpenAI

from heirlooms.adapters.transcription.base import AbstractTranscriptionClient
from heirlooms.core.errors import TranscriptionAppError


class OpenAITranscriptionClient(AbstractTranscriptionClient):
    """Client for the OpenAI audio transcription endpoint.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Transcription model name (e.g., "whisper-1").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model

    async def transcribe(
        self,
        audio: bytes,
        *,
        filename: str,
        content_type: str | None = None,
        language: str | None = None,
    ) -> str:
        """Transcribe audio with OpenAI.

        Args:
            audio: Raw audio bytes.
            filename: Name sent with the upload so the API can detect the format.
            content_type: Optional MIME type of the payload.
            language: Optional language hint.

        Returns:
            str: Transcribed text.

        Raises:
            TranscriptionAppError: If the API call fails.
        """
        file_tuple: tuple[Any, ...] = (
            (filename, audio, content_type) if content_type else (filename, audio)
        )
        request_params: dict[str, Any] = {
            "model": self.model,
            "file": file_tuple,
        }
        if language:
            request_params["language"] = language

        try:
            response = await self.client.audio.transcriptions.create(**request_params)
        except Exception as exc:
            raise TranscriptionAppError(
                code="transcription_failed",
                message=f"OpenAI transcription error: {str(exc)}",
                details={"provider": "openai", "model": self.model},
            ) from exc

        return getattr(response, "text", None) or ""
