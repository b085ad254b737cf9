"""Health check route.

``GET /api/health``
    Verifies that the Twitch Helix API is reachable with the configured
    credentials.  Always returns HTTP 200; ``status`` is ``"ok"`` or
    ``"down"``.  This endpoint is diagnostic and must never raise HTTP 5xx.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Request

from blueribbon_live.api.dependencies import get_fetcher
from blueribbon_live.core.exceptions import MissingCredentialsError

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get("/health")
async def twitch_health(request: Request) -> dict[str, Any]:
    try:
        fetcher = get_fetcher(request)
    except MissingCredentialsError as exc:
        logger.warning("twitch_credentials_missing")
        return {
            "platform": "twitch",
            "checked_at": datetime.now(timezone.utc).isoformat(),
            "status": "down",
            "detail": str(exc),
        }
    return await fetcher.health_check()
