from __future__ import annotations

from heirlooms.api.routes.health import router as health_router
from heirlooms.api.routes.media import router as media_router
from heirlooms.api.routes.transcribe import router as transcribe_router

__all__ = ["health_router", "media_router", "transcribe_router"]
