"""Twitch Helix API constants used by the token cache and stream fetcher."""

from __future__ import annotations

TWITCH_API_BASE: str = "https://api.twitch.tv/helix"
"""Base URL for the Twitch Helix REST API."""

TWITCH_TOKEN_URL: str = "https://id.twitch.tv/oauth2/token"
"""OAuth 2.0 token endpoint for the Client Credentials grant."""

STREAMS_ENDPOINT: str = "/streams"
"""Helix path listing live streams, most-viewed first."""

USERS_ENDPOINT: str = "/users"
"""Helix path returning user profiles for up to 100 ``id`` parameters."""

MAX_PAGE_SIZE: int = 100
"""Maximum ``first`` value accepted by ``GET /streams`` (Twitch maximum)."""

DEFAULT_TITLE_MARKER: str = "blueribbon"
"""Substring a stream title must contain to be listed."""

DEFAULT_SAFETY_MARGIN_SECONDS: float = 60.0
"""Seconds subtracted from ``expires_in`` before a token is treated as expired."""

DEFAULT_TIMEOUT_SECONDS: float = 15.0

USER_AGENT: str = "BlueRibbonLive/1.0 (stream-list proxy)"
