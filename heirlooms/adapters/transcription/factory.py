"""Factory pattern for creating transcription client instances."""

from heirlooms.adapters.transcription.base import AbstractTranscriptionClient
from heirlooms.adapters.transcription.openai_client import OpenAITranscriptionClient
from heirlooms.core.config import settings
from heirlooms.core.errors import ValidationAppError


def create_transcription_client() -> AbstractTranscriptionClient:
    """Instantiate the transcription client configured in settings.

    Returns:
        AbstractTranscriptionClient: Configured client instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    provider = settings.transcription.provider.lower()

    if provider == "openai":
        if not settings.transcription.api_key:
            raise ValidationAppError(
                code="transcription_missing_api_key",
                message="OpenAI provider requires TRANSCRIPTION_API_KEY environment variable",
            )
        return OpenAITranscriptionClient(
            api_key=settings.transcription.api_key,
            model=settings.transcription.model,
            base_url=settings.transcription.base_url,
            timeout_seconds=settings.transcription.timeout_seconds,
        )

    raise ValidationAppError(
        code="transcription_unknown_provider",
        message=(
            f"Unknown transcription provider: '{provider}'. Supported providers: openai"
        ),
    )
