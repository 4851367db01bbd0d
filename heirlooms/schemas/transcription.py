"""Pydantic schemas for transcription responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TranscriptionResponse(BaseModel):
    """Text transcribed from an uploaded voice recording."""

    transcription: str = Field(
        ..., description="Transcribed text, capped for the target field."
    )
    field_type: str | None = Field(
        default=None,
        description="Form field the text is destined for ('title', 'description', ...).",
    )
    char_count: int = Field(
        ..., description="Number of characters in the returned transcription."
    )
    truncated: bool = Field(
        default=False,
        description="Whether the text was cut to the field's maximum length.",
    )
