"""Upload size enforcement for audio uploads."""
from __future__ import annotations

import logging

from fastapi import HTTPException, UploadFile

from heirlooms.core.config import settings
from heirlooms.utils.media_urls import file_size_limit, format_file_size

logger = logging.getLogger(__name__)


def max_upload_bytes(content_type: str | None) -> int:
    """Smaller of the per-type media limit and the configured upload cap."""
    configured = settings.app.max_upload_size_mb * 1024 * 1024
    return min(file_size_limit(content_type), configured)


async def read_upload_file_limited(file: UploadFile) -> bytes:
    """Read an uploaded file in chunks enforcing the max size limit.

    Uses file.size if available (multipart headers), falls back to chunked
    reading with enforcement.

    Args:
        file: FastAPI upload file instance.

    Returns:
        File content as bytes if within the allowed size limit.

    Raises:
        HTTPException: 413 if the file exceeds the size limit.
    """
    max_bytes = max_upload_bytes(file.content_type)
    detail = f"File too large. Maximum size: {format_file_size(max_bytes)}"

    file_size = getattr(file, "size", None)

    if file_size is not None and file_size > max_bytes:
        logger.warning(
            "file_validation.rejected_by_header",
            extra={"file_size": file_size, "max_bytes": max_bytes},
        )
        raise HTTPException(status_code=413, detail=detail)

    size = 0
    chunks: list[bytes] = []

    while True:
        chunk = await file.read(8192)
        if not chunk:
            break

        size += len(chunk)
        if size > max_bytes:
            logger.warning(
                "file_validation.rejected_by_chunked_read",
                extra={"size": size, "max_bytes": max_bytes},
            )
            raise HTTPException(status_code=413, detail=detail)
        chunks.append(chunk)

    return b"".join(chunks)
