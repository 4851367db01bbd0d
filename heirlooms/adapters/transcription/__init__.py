"""Transcription adapter layer - abstracts over speech-to-text providers."""

from heirlooms.adapters.transcription.base import AbstractTranscriptionClient
from heirlooms.adapters.transcription.factory import create_transcription_client
from heirlooms.adapters.transcription.openai_client import OpenAITranscriptionClient

__all__ = [
    "AbstractTranscriptionClient",
    "OpenAITranscriptionClient",
    "create_transcription_client",
]
