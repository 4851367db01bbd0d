from abc import ABC, abstractmethod


class AbstractTranscriptionClient(ABC):
	"""Interface for speech-to-text clients."""

	@abstractmethod
	async def transcribe(
		self,
		audio: bytes,
		*,
		filename: str,
		content_type: str | None = None,
		language: str | None = None,
	) -> str:
		"""Transcribe an audio payload to text.

		Args:
			audio: Raw audio bytes.
			filename: File name hint; providers infer the format from its extension.
			content_type: Optional MIME type of the payload.
			language: Optional ISO-639-1 language hint.

		Returns:
			str: Transcribed text (may be empty for silent audio).

		Raises:
			TranscriptionAppError: If the provider call fails.
		"""
		...
