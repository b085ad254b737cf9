"""FastAPI dependency providers.

The :class:`~blueribbon_live.twitch.fetcher.StreamFetcher` (and the token
cache it owns) lives on ``app.state.fetcher`` for the lifetime of the
process.  It is built from settings on first use unless the application
factory was handed one, which is how tests inject a fake.
"""

from __future__ import annotations

from fastapi import Request

from blueribbon_live.config.settings import Settings, get_settings
from blueribbon_live.core.exceptions import MissingCredentialsError
from blueribbon_live.twitch.fetcher import StreamFetcher
from blueribbon_live.twitch.token_cache import AppTokenCache


def build_fetcher(settings: Settings) -> StreamFetcher:
    """Construct a fetcher and its token cache from *settings*.

    Raises:
        MissingCredentialsError: If the client ID or secret is empty.
    """
    if not settings.has_twitch_credentials:
        raise MissingCredentialsError()

    token_cache = AppTokenCache(
        settings.twitch_client_id,
        settings.twitch_client_secret,
        safety_margin=settings.token_safety_margin_seconds,
        timeout=settings.upstream_timeout_seconds,
    )
    return StreamFetcher(
        token_cache,
        title_marker=settings.title_marker,
        page_size=settings.streams_page_size,
        timeout=settings.upstream_timeout_seconds,
    )


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def get_fetcher(request: Request) -> StreamFetcher:
    """Return the process-wide fetcher, creating it on first use.

    Raises:
        MissingCredentialsError: If no fetcher was injected and the Twitch
            credentials are not configured.
    """
    fetcher: StreamFetcher | None = getattr(request.app.state, "fetcher", None)
    if fetcher is None:
        fetcher = build_fetcher(get_app_settings(request))
        request.app.state.fetcher = fetcher
    return fetcher
