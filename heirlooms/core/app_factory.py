"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build fresh instances.
"""

from __future__ import annotations

from fastapi import FastAPI

from heirlooms.api.routes import health_router, media_router, transcribe_router
from heirlooms.core.config import settings
from heirlooms.core.exception_handlers import setup_exception_handlers
from heirlooms.core.logging import configure_logging
from heirlooms.core.middleware import request_id_middleware
from heirlooms.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Heirlooms Media API",
        description=(
            "Media helpers for the Heirlooms artifact catalogue: classify media "
            "URLs, pick an artifact's primary visual, build Cloudinary derivative "
            "URLs, and transcribe voice notes behind a per-client rate limit."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(media_router, prefix="/v1")
    app.include_router(transcribe_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
