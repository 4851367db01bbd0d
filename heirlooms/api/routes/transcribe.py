from functools import lru_cache

from fastapi import APIRouter, Depends, File, Form, UploadFile

from heirlooms.adapters.transcription.factory import create_transcription_client
from heirlooms.core.file_validation import read_upload_file_limited
from heirlooms.core.rate_limit import enforce_rate_limit
from heirlooms.schemas.transcription import TranscriptionResponse
from heirlooms.services.transcription_service import TranscriptionService

router = APIRouter(tags=["Transcription"])


@lru_cache(maxsize=1)
def get_transcription_service() -> TranscriptionService:
    """Build the transcription service once per process.

    Raises:
        ValidationAppError: If the provider is misconfigured.
    """
    return TranscriptionService(client=create_transcription_client())


@router.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    dependencies=[Depends(enforce_rate_limit)],
)
async def transcribe_audio(
    audio: UploadFile = File(..., description="Voice recording (webm, mp3, m4a, wav, ...)"),
    field_type: str | None = Form(
        None,
        description="Target form field: 'title' caps at 100 chars, 'description' at 3000.",
    ),
    language: str | None = Form(None, description="Optional ISO-639-1 language hint"),
    service: TranscriptionService = Depends(get_transcription_service),
) -> TranscriptionResponse:
    """Transcribe a voice recording into text for an artifact form field.

    Rate limited per client because every call hits a paid provider.
    Domain errors propagate to the global handlers (400 for invalid uploads,
    502 for provider failures).
    """
    audio_bytes = await read_upload_file_limited(audio)
    return await service.transcribe(
        audio_bytes,
        field_type=field_type,
        filename=audio.filename,
        content_type=audio.content_type,
        language=language,
    )
