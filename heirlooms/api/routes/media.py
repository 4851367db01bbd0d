from fastapi import APIRouter, Query

from heirlooms.core.config import settings
from heirlooms.schemas.media import (
    ClassifyMediaResponse,
    DerivativeSet,
    DerivativesResponse,
    MediaClassification,
    MediaUrlsRequest,
    MediaUrlsResponse,
    RewriteResponse,
    ThumbnailValidationRequest,
    ThumbnailValidationResponse,
)
from heirlooms.utils.media_derivatives import MediaSize, build_derivatives_map, rewrite_for_size
from heirlooms.utils.media_urls import (
    is_audio_url,
    is_image_url,
    is_video_url,
    media_kind,
    normalize_media_urls,
    primary_visual_media_url,
)
from heirlooms.utils.thumbnail_validator import validate_artifact_thumbnail

router = APIRouter(prefix="/media", tags=["Media"])


@router.post("/classify", response_model=ClassifyMediaResponse)
def classify_media(payload: MediaUrlsRequest) -> ClassifyMediaResponse:
    """Classify each URL and pick the artifact's primary visual.

    Blank entries and duplicates are dropped before classification; the
    primary visual is chosen from the cleaned list.
    """
    urls = normalize_media_urls(payload.urls)
    items = [
        MediaClassification(
            url=url,
            is_image=is_image_url(url),
            is_video=is_video_url(url),
            is_audio=is_audio_url(url),
            kind=media_kind(url),
        )
        for url in urls
    ]
    return ClassifyMediaResponse(
        items=items,
        primary_visual_media_url=primary_visual_media_url(urls),
        normalized_urls=urls,
    )


@router.post("/normalize", response_model=MediaUrlsResponse)
def normalize_media(payload: MediaUrlsRequest) -> MediaUrlsResponse:
    return MediaUrlsResponse(urls=normalize_media_urls(payload.urls))


@router.post("/derivatives", response_model=DerivativesResponse)
def build_derivatives(payload: MediaUrlsRequest) -> DerivativesResponse:
    """Build the derivatives map persisted alongside an artifact's media."""
    derivatives_map = build_derivatives_map(normalize_media_urls(payload.urls))
    return DerivativesResponse(
        derivatives={
            url: DerivativeSet.model_validate(derivatives.to_dict())
            for url, derivatives in derivatives_map.items()
        }
    )


@router.get("/rewrite", response_model=RewriteResponse)
def rewrite_media_url(
    url: str = Query(..., description="Original media URL"),
    size: MediaSize = Query(MediaSize.THUMB, description="Target display size"),
) -> RewriteResponse:
    rewritten = rewrite_for_size(
        url,
        size,
        cloud_name=settings.media.cloudinary_cloud_name,
        placeholder=settings.media.placeholder_url,
    )
    return RewriteResponse(url=url, size=size, rewritten_url=rewritten)


@router.post("/thumbnail", response_model=ThumbnailValidationResponse)
def validate_thumbnail(payload: ThumbnailValidationRequest) -> ThumbnailValidationResponse:
    """Report whether an artifact's media yields a usable thumbnail."""
    derivatives = None
    if payload.derivatives:
        derivatives = {
            url: entry.model_dump(by_alias=True) for url, entry in payload.derivatives.items()
        }

    result = validate_artifact_thumbnail(
        normalize_media_urls(payload.urls),
        derivatives=derivatives,
        cloud_name=settings.media.cloudinary_cloud_name,
    )
    return ThumbnailValidationResponse(
        has_valid_thumbnail=result.has_valid_thumbnail,
        thumbnail_url=result.thumbnail_url,
        reason=result.reason,
        media_count=result.media_count,
        visual_media_count=result.visual_media_count,
        audio_media_count=result.audio_media_count,
    )
