"""Cloudinary derivative URL construction.

Derivatives are built by inserting a transformation segment after
``/upload/``; Cloudinary materializes the resized asset on first fetch, so
nothing here performs I/O or checks that the URL resolves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from heirlooms.utils.media_urls import (
    VIDEO_UPLOAD_SEGMENT,
    is_audio_url,
    is_cloudinary_url,
    is_supabase_storage_url,
    is_video_url,
)

logger = logging.getLogger(__name__)

UPLOAD_DELIMITER = "/upload/"
DEFAULT_PLACEHOLDER_URL = "/placeholder.svg"

# Only these containers support frame extraction (so_/du_ parameters)
FRAME_EXTRACTABLE_VIDEO_EXTENSIONS = (".mp4", ".mov", ".avi", ".webm", ".mkv")

_VIDEO_FRAME = "q_auto,f_jpg,so_1.0,du_0"
_IMAGE_AUTO = "q_auto,f_auto"

VIDEO_DERIVATIVE_TRANSFORMS = {
    "small_thumb": f"w_120,h_120,c_fill,{_VIDEO_FRAME}",
    "thumb": f"w_400,h_400,c_fill,{_VIDEO_FRAME}",
    "medium": f"w_1024,c_limit,{_VIDEO_FRAME}",
    "large": f"w_1600,c_limit,{_VIDEO_FRAME}",
}

IMAGE_DERIVATIVE_TRANSFORMS = {
    "small_thumb": f"w_120,h_120,c_fill,{_IMAGE_AUTO}",
    "thumb": f"w_400,h_400,c_fill,{_IMAGE_AUTO}",
    "medium": f"w_1024,c_limit,{_IMAGE_AUTO}",
    "large": f"w_1600,c_limit,{_IMAGE_AUTO}",
}


class MediaSize(str, Enum):
    THUMB = "thumb"
    CARD = "card"
    MEDIUM = "medium"
    DETAIL = "detail"
    LARGE = "large"
    FULLRES = "fullres"


SIZE_TRANSFORMS: dict[MediaSize, str] = {
    MediaSize.THUMB: f"w_400,h_400,c_fill,{_IMAGE_AUTO}",
    MediaSize.CARD: f"w_800,h_600,c_fit,{_IMAGE_AUTO}",
    MediaSize.MEDIUM: f"w_1024,c_limit,{_IMAGE_AUTO}",
    MediaSize.DETAIL: f"w_1200,h_1200,c_limit,{_IMAGE_AUTO}",
    MediaSize.LARGE: f"w_1600,c_limit,{_IMAGE_AUTO}",
    MediaSize.FULLRES: _IMAGE_AUTO,
}

VIDEO_THUMB_TRANSFORM = VIDEO_DERIVATIVE_TRANSFORMS["thumb"]

# Which stored derivative can stand in for a requested size
_STORED_DERIVATIVE_FOR_SIZE: dict[MediaSize, str] = {
    MediaSize.THUMB: "thumb",
    MediaSize.CARD: "medium",
    MediaSize.MEDIUM: "medium",
    MediaSize.DETAIL: "large",
    MediaSize.LARGE: "large",
}


@dataclass(frozen=True)
class MediaDerivatives:
    """Resized variants of one original media URL."""

    thumb: str
    medium: str
    small_thumb: str | None = None
    large: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Serialize with the camelCase keys stored on artifact records."""
        data = {}
        if self.small_thumb is not None:
            data["smallThumb"] = self.small_thumb
        data["thumb"] = self.thumb
        data["medium"] = self.medium
        if self.large is not None:
            data["large"] = self.large
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MediaDerivatives":
        return cls(
            thumb=data["thumb"],
            medium=data["medium"],
            small_thumb=data.get("smallThumb"),
            large=data.get("large"),
        )


def _split_upload_url(url: str | None) -> tuple[str, str] | None:
    if not url or not isinstance(url, str) or not is_cloudinary_url(url):
        return None

    parts = url.split(UPLOAD_DELIMITER)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def _join(prefix: str, transformation: str, path: str) -> str:
    return f"{prefix}{UPLOAD_DELIMITER}{transformation}/{path}"


def is_frame_extractable_video(url: str | None) -> bool:
    """Stricter video test: only Cloudinary video assets in supported containers.

    Audio uploads sharing the video bucket are excluded.
    """
    if not url or not isinstance(url, str):
        return False

    lower_url = url.lower()
    if VIDEO_UPLOAD_SEGMENT not in lower_url:
        return False
    if not any(ext in lower_url for ext in FRAME_EXTRACTABLE_VIDEO_EXTENSIONS):
        return False
    return is_video_url(url)


def apply_transformation(url: str, transformation: str) -> str:
    """Insert a transformation after ``/upload/``.

    Returns:
        The transformed URL, or ``url`` unchanged when it is not a Cloudinary
        upload URL.
    """
    split = _split_upload_url(url)
    if split is None:
        return url
    prefix, path = split
    return _join(prefix, transformation, path)


def build_derivative_urls(url: str | None) -> MediaDerivatives | None:
    """Construct the four derivative URLs for a Cloudinary asset.

    Frame-extractable videos get poster frames captured at the 1 second mark;
    other visual assets get native image transforms. Audio and video formats
    without frame extraction have no visual derivative.

    Args:
        url: Original media URL.

    Returns:
        MediaDerivatives, or None when the URL is not a Cloudinary upload URL
        or has no derivable visual.
    """
    split = _split_upload_url(url)
    if split is None:
        return None
    prefix, path = split

    if is_frame_extractable_video(url):
        transforms = VIDEO_DERIVATIVE_TRANSFORMS
    elif is_video_url(url) or is_audio_url(url):
        logger.debug(
            "media.derivatives.unsupported",
            extra={"reason": "no_frame_extraction", "media_path": path[-64:]},
        )
        return None
    else:
        transforms = IMAGE_DERIVATIVE_TRANSFORMS

    return MediaDerivatives(
        small_thumb=_join(prefix, transforms["small_thumb"], path),
        thumb=_join(prefix, transforms["thumb"], path),
        medium=_join(prefix, transforms["medium"], path),
        large=_join(prefix, transforms["large"], path),
    )


def build_derivatives_map(urls: Iterable[str | None] | None) -> dict[str, MediaDerivatives]:
    """Map each derivable URL to its derivatives; other URLs are left out."""
    derivatives_map: dict[str, MediaDerivatives] = {}
    skipped = 0

    for url in urls or ():
        derivatives = build_derivative_urls(url)
        if derivatives is None:
            skipped += 1
            continue
        derivatives_map[url] = derivatives  # type: ignore[index]

    if skipped:
        logger.debug(
            "media.derivatives.skipped",
            extra={"skipped": skipped, "built": len(derivatives_map)},
        )
    return derivatives_map


def cloudinary_fetch_url(remote_url: str, transformation: str, *, cloud_name: str) -> str:
    """Build a fetch URL so Cloudinary pulls and transforms a remote asset."""
    resource_type = "video" if is_video_url(remote_url) else "image"
    return (
        f"https://res.cloudinary.com/{cloud_name}/{resource_type}/fetch/"
        f"{transformation}/{remote_url}"
    )


def _stored_derivative(
    url: str,
    size: MediaSize,
    derivatives: Mapping[str, MediaDerivatives | Mapping[str, Any]] | None,
) -> str | None:
    if not derivatives or size not in _STORED_DERIVATIVE_FOR_SIZE:
        return None

    entry = derivatives.get(url)
    name = _STORED_DERIVATIVE_FOR_SIZE[size]
    if isinstance(entry, MediaDerivatives):
        return getattr(entry, name)
    if isinstance(entry, Mapping):
        value = entry.get(name)
        return value if isinstance(value, str) else None
    return None


def _size_transformation(size: MediaSize, *, video: bool) -> str:
    if size is MediaSize.THUMB and video:
        return VIDEO_THUMB_TRANSFORM
    return SIZE_TRANSFORMS[size]


def rewrite_for_size(
    url: str | None,
    size: MediaSize | str,
    *,
    derivatives: Mapping[str, MediaDerivatives | Mapping[str, Any]] | None = None,
    cloud_name: str | None = None,
    placeholder: str = DEFAULT_PLACEHOLDER_URL,
) -> str:
    """Return the URL to display ``url`` at a given size.

    Resolution order:
    1. Blank URL: the placeholder.
    2. Supabase Storage URL with a configured cloud: a Cloudinary fetch URL
       (full resolution serves the storage URL directly).
    3. A stored derivative for the URL, when one matches the size.
    4. Cloudinary URL: the size transformation inserted after ``/upload/``.
    5. Anything else: ``url`` unchanged.

    Args:
        url: Original media URL.
        size: One of :class:`MediaSize`.
        derivatives: Optional stored derivatives map (original URL to set).
        cloud_name: Cloudinary cloud used for fetch URLs.
        placeholder: Returned for blank input.

    Raises:
        ValueError: If ``size`` is not a known size.
    """
    size = MediaSize(size)

    if not url or not isinstance(url, str) or not url.strip():
        return placeholder

    if is_supabase_storage_url(url) and cloud_name:
        if size is MediaSize.FULLRES:
            return url
        return cloudinary_fetch_url(
            url, _size_transformation(size, video=is_video_url(url)), cloud_name=cloud_name
        )

    stored = _stored_derivative(url, size, derivatives)
    if stored:
        return stored

    if is_cloudinary_url(url):
        return apply_transformation(
            url, _size_transformation(size, video=is_frame_extractable_video(url))
        )

    return url
