"""Media URL classification and normalization.

Classification is a substring match on the lowercased URL, so an extension
anywhere in the string (including a query parameter) counts. Every function
here is total: ``None``, empty or non-string input never raises.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic", ".heif")
VIDEO_EXTENSIONS = (".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v", ".flv", ".wmv")
AUDIO_EXTENSIONS = (".mp3", ".wav", ".m4a", ".aac", ".ogg", ".opus", ".webm")

# Audio formats that are never video containers; .webm is both
AUDIO_ONLY_EXTENSIONS = tuple(ext for ext in AUDIO_EXTENSIONS if ext not in VIDEO_EXTENSIONS)

# Cloudinary stores audio under the video resource type
VIDEO_UPLOAD_SEGMENT = "/video/upload/"

CLOUDINARY_DOMAIN = "cloudinary.com"
SUPABASE_DOMAIN = "supabase.co"
SUPABASE_PUBLIC_STORAGE_SEGMENT = "/storage/v1/object/public/"

DEFAULT_MAX_FILE_BYTES = 50 * 1024 * 1024
VIDEO_MAX_FILE_BYTES = 500 * 1024 * 1024


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"


def _lower(url: Any) -> str:
    if not url or not isinstance(url, str):
        return ""
    return url.lower()


def _contains_any(lower_url: str, extensions: Iterable[str]) -> bool:
    return any(ext in lower_url for ext in extensions)


def is_image_url(url: str | None) -> bool:
    """Return True when the URL mentions a known image extension."""
    lower_url = _lower(url)
    if not lower_url:
        return False
    return _contains_any(lower_url, IMAGE_EXTENSIONS)


def is_video_url(url: str | None) -> bool:
    """Return True when the URL points to a video.

    Anything under Cloudinary's ``/video/upload/`` counts, except audio-only
    formats that share that bucket (voice notes). Otherwise a known video
    extension is required.
    """
    lower_url = _lower(url)
    if not lower_url:
        return False

    if VIDEO_UPLOAD_SEGMENT in lower_url:
        return not _contains_any(lower_url, AUDIO_ONLY_EXTENSIONS)

    return _contains_any(lower_url, VIDEO_EXTENSIONS)


def is_audio_url(url: str | None) -> bool:
    """Return True when the URL mentions a known audio extension.

    Note that ``.webm`` matches both this predicate and :func:`is_video_url`;
    use :func:`media_kind` when a single answer is needed.
    """
    lower_url = _lower(url)
    if not lower_url:
        return False
    return _contains_any(lower_url, AUDIO_EXTENSIONS)


def media_kind(url: str | None) -> MediaKind:
    """Resolve a URL to exactly one kind.

    Precedence is image, video, audio. A ``.webm`` file therefore resolves to
    video even though :func:`is_audio_url` also accepts it.
    """
    if is_image_url(url):
        return MediaKind.IMAGE
    if is_video_url(url):
        return MediaKind.VIDEO
    if is_audio_url(url):
        return MediaKind.AUDIO
    return MediaKind.OTHER


def is_cloudinary_url(url: str | None) -> bool:
    return CLOUDINARY_DOMAIN in _lower(url)


def is_supabase_storage_url(url: str | None) -> bool:
    lower_url = _lower(url)
    return SUPABASE_DOMAIN in lower_url and SUPABASE_PUBLIC_STORAGE_SEGMENT in lower_url


def primary_visual_media_url(urls: Iterable[str | None] | None) -> str | None:
    """Pick the representative visual for an ordered media list.

    Args:
        urls: Media URLs in display order.

    Returns:
        The first image, else the first video, else None (audio-only lists
        have no visual representation).
    """
    if not urls:
        return None

    candidates = list(urls)
    for url in candidates:
        if is_image_url(url):
            return url
    for url in candidates:
        if is_video_url(url):
            return url
    return None


def has_visual_media(urls: Iterable[str | None] | None) -> bool:
    return primary_visual_media_url(urls) is not None


def normalize_media_urls(urls: Iterable[Any] | None) -> list[str]:
    """Drop blank entries and duplicates, keeping first-seen order.

    Args:
        urls: Raw media URL list, possibly containing None or empty strings.

    Returns:
        The cleaned list. This is a stable filter, not a sort.
    """
    if not urls:
        return []

    seen: set[str] = set()
    normalized: list[str] = []
    for url in urls:
        if not isinstance(url, str) or not url.strip():
            continue
        if url in seen:
            continue
        seen.add(url)
        normalized.append(url)
    return normalized


def file_size_limit(content_type: str | None) -> int:
    """Maximum upload size in bytes for a MIME type."""
    if content_type and content_type.lower().startswith("video/"):
        return VIDEO_MAX_FILE_BYTES
    return DEFAULT_MAX_FILE_BYTES


def format_file_size(num_bytes: float) -> str:
    """Human-readable size with one decimal: KB below 1MB, then MB, then GB."""
    kb = num_bytes / 1024
    if kb < 1024:
        return f"{kb:.1f}KB"
    mb = kb / 1024
    if mb < 1024:
        return f"{mb:.1f}MB"
    return f"{mb / 1024:.1f}GB"
