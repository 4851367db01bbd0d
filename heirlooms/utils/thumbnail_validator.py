"""Thumbnail availability checks for artifacts and collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from heirlooms.utils.media_derivatives import MediaDerivatives, MediaSize, rewrite_for_size
from heirlooms.utils.media_urls import (
    is_audio_url,
    is_image_url,
    is_video_url,
    primary_visual_media_url,
)


@dataclass(frozen=True)
class ThumbnailValidationResult:
    has_valid_thumbnail: bool
    thumbnail_url: str | None
    media_count: int
    visual_media_count: int
    audio_media_count: int
    reason: str | None = None


def validate_artifact_thumbnail(
    media_urls: Sequence[str] | None,
    *,
    derivatives: Mapping[str, MediaDerivatives | Mapping[str, Any]] | None = None,
    cloud_name: str | None = None,
) -> ThumbnailValidationResult:
    """Report whether an artifact's media yields a thumbnail.

    Args:
        media_urls: Artifact media in display order.
        derivatives: Stored derivatives map, preferred over dynamic rewrites.
        cloud_name: Cloudinary cloud used for Supabase Storage fetch URLs.

    Returns:
        ThumbnailValidationResult with counts and, when found, the thumbnail URL.
    """
    if not media_urls:
        return ThumbnailValidationResult(
            has_valid_thumbnail=False,
            thumbnail_url=None,
            reason="No media files",
            media_count=0,
            visual_media_count=0,
            audio_media_count=0,
        )

    visual_count = sum(1 for url in media_urls if is_image_url(url) or is_video_url(url))
    audio_count = sum(1 for url in media_urls if is_audio_url(url))

    primary = primary_visual_media_url(media_urls)
    if primary is None:
        return ThumbnailValidationResult(
            has_valid_thumbnail=False,
            thumbnail_url=None,
            reason="Only audio files (expected)" if audio_count else "No valid visual media",
            media_count=len(media_urls),
            visual_media_count=visual_count,
            audio_media_count=audio_count,
        )

    return ThumbnailValidationResult(
        has_valid_thumbnail=True,
        thumbnail_url=rewrite_for_size(
            primary,
            MediaSize.THUMB,
            derivatives=derivatives,
            cloud_name=cloud_name,
        ),
        media_count=len(media_urls),
        visual_media_count=visual_count,
        audio_media_count=audio_count,
    )


def validate_collection_thumbnail(
    cover_image: str | None,
    artifact_media_urls: Sequence[Sequence[str] | None] | None,
) -> ThumbnailValidationResult:
    """Report whether a collection can show a thumbnail.

    A cover image wins; otherwise the primary visual of the first artifact
    that has one is used.
    """
    if cover_image:
        return ThumbnailValidationResult(
            has_valid_thumbnail=True,
            thumbnail_url=cover_image,
            reason="Using cover image",
            media_count=1,
            visual_media_count=1,
            audio_media_count=0,
        )

    if not artifact_media_urls:
        return ThumbnailValidationResult(
            has_valid_thumbnail=False,
            thumbnail_url=None,
            reason="No artifacts or cover image",
            media_count=0,
            visual_media_count=0,
            audio_media_count=0,
        )

    all_urls = [url for urls in artifact_media_urls for url in (urls or [])]
    audio_count = sum(1 for url in all_urls if is_audio_url(url))
    thumbnails = [
        primary
        for primary in (primary_visual_media_url(urls) for urls in artifact_media_urls)
        if primary
    ]

    if not thumbnails:
        return ThumbnailValidationResult(
            has_valid_thumbnail=False,
            thumbnail_url=None,
            reason="Artifacts have no visual media",
            media_count=len(all_urls),
            visual_media_count=0,
            audio_media_count=audio_count,
        )

    return ThumbnailValidationResult(
        has_valid_thumbnail=True,
        thumbnail_url=thumbnails[0],
        reason=f"Using {len(thumbnails)} artifact thumbnail(s)",
        media_count=len(all_urls),
        visual_media_count=len(thumbnails),
        audio_media_count=audio_count,
    )
