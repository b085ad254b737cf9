"""Application settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.
Twitch credentials are accessed exclusively through this module;
never call ``os.getenv`` directly elsewhere in the codebase.

Usage::

    from blueribbon_live.config.settings import get_settings

    settings = get_settings()
    client_id = settings.twitch_client_id
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide configuration backed by environment variables and an optional .env file.

    Twitch credentials default to empty strings so that the process can start
    without them; the streams endpoint then answers with a generic error until
    they are supplied.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Twitch application credentials
    # ------------------------------------------------------------------

    twitch_client_id: str = ""
    """Client ID of the registered Twitch application."""

    twitch_client_secret: str = ""
    """Client secret used for the OAuth client-credentials grant."""

    # ------------------------------------------------------------------
    # Stream selection
    # ------------------------------------------------------------------

    title_marker: str = "blueribbon"
    """Substring a stream title must contain (case-insensitive) to be listed."""

    streams_page_size: int = Field(default=100, ge=1, le=100)
    """Value of the ``first`` query parameter on ``GET /streams``.

    Twitch caps this at 100.  Only a single page is requested.
    """

    token_safety_margin_seconds: float = Field(default=60.0, ge=0)
    """Seconds subtracted from the reported token lifetime."""

    upstream_timeout_seconds: float = 15.0
    """Timeout applied to every outbound Twitch request."""

    # ------------------------------------------------------------------
    # Display client
    # ------------------------------------------------------------------

    poll_interval_seconds: float = 30.0
    """Interval between display-client polls of ``GET /api/streams``."""

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"
    port: int = 5000

    app_name: str = "BlueRibbon Live"
    """Human-readable application name shown in the OpenAPI docs."""

    debug: bool = False
    """Enable FastAPI debug mode.  Never True in production."""

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    # ------------------------------------------------------------------
    # CORS
    # ------------------------------------------------------------------

    allowed_origins: list[str] = ["http://localhost:3000"]
    """Browser origins permitted by the CORS middleware."""

    @property
    def has_twitch_credentials(self) -> bool:
        return bool(self.twitch_client_id and self.twitch_client_secret)


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Uses ``functools.lru_cache`` so that Pydantic Settings reads the environment
    and .env file exactly once per process lifetime.  In tests, call
    ``get_settings.cache_clear()`` after patching environment variables.

    Returns:
        Settings: The validated settings object.
    """
    return Settings()
