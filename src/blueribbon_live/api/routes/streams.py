"""Stream list route.

``GET /api/streams``
    Returns ``{"streams": [...]}`` with live streams matching the title
    marker, most viewers first.  Any upstream failure yields HTTP 500 with a
    generic ``{"error": ...}`` body; the upstream detail is logged only.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from blueribbon_live.api.dependencies import get_fetcher
from blueribbon_live.core.exceptions import BlueRibbonError
from blueribbon_live.twitch.fetcher import StreamFetcher
from blueribbon_live.twitch.schemas import ErrorResponse, StreamListResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["streams"])

GENERIC_ERROR_MESSAGE = "Failed to fetch streams"


def generic_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=GENERIC_ERROR_MESSAGE).model_dump(),
    )


@router.get(
    "/streams",
    response_model=StreamListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_streams(
    fetcher: Annotated[StreamFetcher, Depends(get_fetcher)],
) -> StreamListResponse | JSONResponse:
    """Return the filtered, enriched and sorted list of live streams."""
    try:
        streams = await fetcher.get_streams()
    except BlueRibbonError as exc:
        logger.error(
            "streams_fetch_failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return generic_error_response()

    return StreamListResponse(streams=streams)
