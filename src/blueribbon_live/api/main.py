"""FastAPI application factory and entry point.

Creates the application instance, registers the CORS and request-logging
middleware, and mounts the stream list and health routers under ``/api``.

Usage::

    # Development server (from project root)
    uvicorn blueribbon_live.api.main:app --reload --port 5000

    # Or via the package entry point, which reads HOST/PORT from settings
    python -m blueribbon_live
"""

from __future__ import annotations

import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blueribbon_live.api.routes import health as health_routes
from blueribbon_live.api.routes import streams as stream_routes
from blueribbon_live.config.settings import Settings, get_settings
from blueribbon_live.core.exceptions import BlueRibbonError, MissingCredentialsError
from blueribbon_live.core.logging_config import configure_logging, request_id_var
from blueribbon_live.twitch.fetcher import StreamFetcher

logger = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    fetcher: StreamFetcher | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Separated from the module-level ``app`` singleton so that tests can pass
    their own settings and an injected fetcher.

    Args:
        settings: Settings to use instead of :func:`get_settings`.
        fetcher: Pre-built fetcher.  When ``None`` one is built from
            settings on the first request.

    Returns:
        A fully configured ``FastAPI`` instance.
    """
    settings = settings if settings is not None else get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            debug=settings.debug,
            log_level=settings.log_level,
            title_marker=settings.title_marker,
        )
        if fetcher is None and not settings.has_twitch_credentials:
            logger.warning("twitch_credentials_missing")
        yield
        logger.info("application_shutdown")

    application = FastAPI(
        title=settings.app_name,
        description="Live Twitch streams whose title matches a marker substring.",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.fetcher = fetcher

    # ---- Middleware --------------------------------------------------------

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def request_logging_middleware(
        request: Request, call_next: Callable
    ) -> Response:
        """Log every request with its status and duration.

        Binds a unique ``request_id`` to the structlog context and echoes it
        back in the ``X-Request-ID`` response header.
        """
        request_id = str(uuid.uuid4())
        request_id_var.set(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as exc:
            logger.error("unhandled_exception", exc_info=exc)
            raise
        finally:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            log_fn = logger.warning if status_code >= 400 else logger.info
            log_fn("request_complete", status_code=status_code, elapsed_ms=elapsed_ms)

        response.headers["X-Request-ID"] = request_id
        return response

    # ---- Error handling ----------------------------------------------------

    @application.exception_handler(BlueRibbonError)
    async def blueribbon_error_handler(request: Request, exc: BlueRibbonError) -> JSONResponse:
        """Translate errors raised outside a route body into the generic 500."""
        if isinstance(exc, MissingCredentialsError):
            logger.error("twitch_credentials_missing", path=request.url.path)
        else:
            logger.error("request_failed", error=str(exc), error_type=type(exc).__name__)
        return stream_routes.generic_error_response()

    # ---- Routers -----------------------------------------------------------

    application.include_router(stream_routes.router, prefix="/api")
    application.include_router(health_routes.router, prefix="/api")

    @application.get("/health", tags=["system"])
    async def health() -> JSONResponse:
        """Process-level liveness check; performs no I/O."""
        return JSONResponse({"status": "ok"})

    return application


app = create_app()
"""The FastAPI application instance passed to Uvicorn."""
