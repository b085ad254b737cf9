"""Twitch Helix integration: app token cache and live-stream fetcher.

Implemented functionality:
    - ``AppTokenCache``: Client Credentials grant with a cached token that
      is refreshed ``safety_margin`` seconds before it expires.
    - ``StreamFetcher.get_streams``: one page of ``GET /streams``, filtered by
      title marker, joined with ``GET /users`` profile images, sorted by
      viewer count.
    - ``StreamFetcher.health_check``: Helix reachability check.
"""

from __future__ import annotations

from blueribbon_live.twitch.fetcher import StreamFetcher
from blueribbon_live.twitch.schemas import EnrichedStream, StreamRecord, UserProfile
from blueribbon_live.twitch.token_cache import AppTokenCache, Credential

__all__ = [
    "AppTokenCache",
    "Credential",
    "EnrichedStream",
    "StreamFetcher",
    "StreamRecord",
    "UserProfile",
]
