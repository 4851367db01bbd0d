"""Pydantic schemas for media URL endpoints."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from heirlooms.utils.media_derivatives import MediaSize
from heirlooms.utils.media_urls import MediaKind


class MediaUrlsRequest(BaseModel):
    """Ordered list of media URLs as stored on an artifact."""

    urls: List[Optional[str]] = Field(
        default_factory=list,
        description="Media URLs in display order. Blank entries are tolerated.",
    )


class MediaUrlsResponse(BaseModel):
    urls: List[str] = Field(default_factory=list)


class MediaClassification(BaseModel):
    url: str
    is_image: bool
    is_video: bool
    is_audio: bool
    kind: MediaKind = Field(
        ..., description="Single resolved kind (image, then video, then audio)."
    )


class ClassifyMediaResponse(BaseModel):
    items: List[MediaClassification] = Field(default_factory=list)
    primary_visual_media_url: Optional[str] = Field(
        default=None,
        description="First image, else first video, else null.",
    )
    normalized_urls: List[str] = Field(default_factory=list)


class DerivativeSet(BaseModel):
    """Derivative URLs in the shape stored on artifact records."""

    model_config = ConfigDict(populate_by_name=True)

    small_thumb: Optional[str] = Field(default=None, alias="smallThumb")
    thumb: str
    medium: str
    large: Optional[str] = None


class DerivativesResponse(BaseModel):
    derivatives: Dict[str, DerivativeSet] = Field(
        default_factory=dict,
        description="Original URL to derivative set; non-Cloudinary URLs are absent.",
    )


class RewriteResponse(BaseModel):
    url: str
    size: MediaSize
    rewritten_url: str


class ThumbnailValidationRequest(MediaUrlsRequest):
    derivatives: Optional[Dict[str, DerivativeSet]] = Field(
        default=None,
        description="Stored derivatives map keyed by original URL.",
    )


class ThumbnailValidationResponse(BaseModel):
    has_valid_thumbnail: bool
    thumbnail_url: Optional[str] = None
    reason: Optional[str] = None
    media_count: int
    visual_media_count: int
    audio_media_count: int
