"""Transcription service wrapping the speech-to-text adapter.

Validates the uploaded audio, calls the provider, and shapes the text for the
form field it is destined for (titles and descriptions have length caps).
"""

import hashlib
import logging

from heirlooms.adapters.transcription.base import AbstractTranscriptionClient
from heirlooms.core.errors import ValidationAppError
from heirlooms.schemas.transcription import TranscriptionResponse

logger = logging.getLogger(__name__)

# Recorder uploads arrive as webm; the provider infers format from the name
DEFAULT_AUDIO_FILENAME = "audio.webm"

FIELD_MAX_CHARS: dict[str, int] = {
    "title": 100,
    "description": 3000,
}


def _truncate(text: str, max_chars: int | None) -> tuple[str, bool]:
    """Truncate text to max_chars if a cap applies.

    Returns:
        Tuple of (truncated_text, was_truncated).
    """
    if max_chars is None or len(text) <= max_chars:
        return text, False
    return text[:max_chars], True


class TranscriptionService:
    """Service turning uploaded audio into form-ready text.

    Attributes:
        client: Speech-to-text adapter.
    """

    def __init__(self, client: AbstractTranscriptionClient) -> None:
        self.client = client

    def _validate_audio(self, audio: bytes, content_type: str | None) -> None:
        """Reject empty payloads and non-audio uploads.

        Raises:
            ValidationAppError: If the payload cannot be transcribed.
        """
        if not audio:
            raise ValidationAppError(
                code="audio_missing",
                message="No audio file provided",
            )

        # Browsers label MediaRecorder output as audio/webm or video/webm
        if content_type and not content_type.lower().startswith(("audio/", "video/")):
            raise ValidationAppError(
                code="audio_unsupported_type",
                message="Uploaded file is not an audio recording",
                details={"content_type": content_type},
            )

    async def transcribe(
        self,
        audio: bytes,
        *,
        field_type: str | None = None,
        filename: str | None = None,
        content_type: str | None = None,
        language: str | None = None,
    ) -> TranscriptionResponse:
        """Transcribe audio and cap the result for its target field.

        Args:
            audio: Raw audio bytes.
            field_type: Target form field ("title", "description", or other).
            filename: Original upload name, used as a format hint.
            content_type: MIME type reported by the client.
            language: Optional language hint for the provider.

        Returns:
            TranscriptionResponse with the (possibly truncated) text.

        Raises:
            ValidationAppError: If the upload is empty or not audio.
            TranscriptionAppError: If the provider call fails.
        """
        self._validate_audio(audio, content_type)

        raw_text = await self.client.transcribe(
            audio,
            filename=filename or DEFAULT_AUDIO_FILENAME,
            content_type=content_type,
            language=language,
        )

        text, truncated = _truncate(raw_text.strip(), FIELD_MAX_CHARS.get(field_type or ""))

        logger.info(
            "transcription.completed",
            extra={
                "field_type": field_type,
                "audio_bytes": len(audio),
                "audio_sha": hashlib.sha256(audio).hexdigest()[:16],
                "char_count": len(text),
                "truncated": truncated,
            },
        )

        return TranscriptionResponse(
            transcription=text,
            field_type=field_type,
            char_count=len(text),
            truncated=truncated,
        )
