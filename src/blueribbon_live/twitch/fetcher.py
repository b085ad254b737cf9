"""Live-stream fetcher for the Twitch Helix API.

Pipeline for one :meth:`StreamFetcher.get_streams` call::

    AppTokenCache.get_access_token()
        → GET /streams?first=<page_size>      (single page)
        → keep titles containing the marker   (case-insensitive)
        → GET /users?id=...                   (only if anything matched)
        → join profile_image_url by user_id
        → sort by viewer_count, descending, stable

Any failure along the way raises :class:`StreamFetchError`; no partial
results are returned.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from blueribbon_live.core.exceptions import (
    StreamFetchError,
    StreamRateLimitError,
    TwitchAuthError,
)
from blueribbon_live.twitch.config import (
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TITLE_MARKER,
    MAX_PAGE_SIZE,
    STREAMS_ENDPOINT,
    TWITCH_API_BASE,
    USER_AGENT,
    USERS_ENDPOINT,
)
from blueribbon_live.twitch.schemas import EnrichedStream, StreamRecord, UserProfile
from blueribbon_live.twitch.token_cache import AppTokenCache

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def filter_by_marker(
    streams: Iterable[StreamRecord],
    marker: str,
) -> list[StreamRecord]:
    """Return the streams whose title contains *marker*, ignoring case."""
    needle = marker.casefold()
    return [s for s in streams if needle in s.title.casefold()]


def distinct_user_ids(streams: Iterable[StreamRecord]) -> list[str]:
    """Return broadcaster IDs in first-seen order without duplicates."""
    return list(dict.fromkeys(s.user_id for s in streams))


def enrich_streams(
    streams: Iterable[StreamRecord],
    profiles: Mapping[str, UserProfile],
) -> list[EnrichedStream]:
    """Join each stream to its broadcaster profile image.

    Args:
        streams: Filtered stream records.
        profiles: Profiles keyed by user ID.

    Returns:
        Enriched streams in input order.  Broadcasters without a profile get
        ``profile_image_url=None``.
    """
    enriched: list[EnrichedStream] = []
    for stream in streams:
        profile = profiles.get(stream.user_id)
        enriched.append(
            EnrichedStream(
                **stream.model_dump(),
                profile_image_url=profile.profile_image_url if profile else None,
            )
        )
    return enriched


def sort_by_viewers(streams: Iterable[EnrichedStream]) -> list[EnrichedStream]:
    """Sort by viewer count, highest first.  Ties keep their input order."""
    return sorted(streams, key=lambda s: s.viewer_count, reverse=True)


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class StreamFetcher:
    """Fetches, filters and enriches live Twitch streams.

    Args:
        token_cache: Owner of the app access token.
        title_marker: Substring a title must contain to be included.
        page_size: ``first`` parameter for ``GET /streams`` (1..100).
        http_client: Optional injected :class:`httpx.AsyncClient` for testing.
        timeout: Request timeout used when no client is injected.
    """

    platform_name: str = "twitch"

    def __init__(
        self,
        token_cache: AppTokenCache,
        *,
        title_marker: str = DEFAULT_TITLE_MARKER,
        page_size: int = MAX_PAGE_SIZE,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")
        self.token_cache = token_cache
        self.title_marker = title_marker
        self.page_size = page_size
        self._http_client = http_client
        self._timeout = timeout

    async def get_streams(self) -> list[EnrichedStream]:
        """Return live streams matching the title marker, most viewers first.

        Raises:
            StreamFetchError: On token acquisition failure (the
                :class:`TwitchAuthError` is chained), transport error,
                non-2xx status or malformed payload.
            StreamRateLimitError: On HTTP 429 from Helix.
        """
        try:
            token = await self.token_cache.get_access_token()
        except TwitchAuthError as exc:
            raise StreamFetchError(
                f"twitch: could not authenticate: {exc}",
                status_code=exc.status_code,
            ) from exc

        async with self._client() as client:
            raw_streams = await self._get_data(
                client, STREAMS_ENDPOINT, token, params={"first": self.page_size}
            )
            streams = self._parse(raw_streams, StreamRecord, STREAMS_ENDPOINT)
            matched = filter_by_marker(streams, self.title_marker)

            profiles: dict[str, UserProfile] = {}
            user_ids = distinct_user_ids(matched)
            if user_ids:
                raw_users = await self._get_data(
                    client, USERS_ENDPOINT, token, params=[("id", uid) for uid in user_ids]
                )
                profiles = {
                    p.id: p for p in self._parse(raw_users, UserProfile, USERS_ENDPOINT)
                }

        result = sort_by_viewers(enrich_streams(matched, profiles))
        logger.info(
            "twitch_streams_fetched",
            upstream=len(streams),
            matched=len(result),
            profiles=len(profiles),
        )
        return result

    async def health_check(self) -> dict[str, Any]:
        """Verify that Helix is reachable and the credentials authenticate.

        Calls ``GET /streams?first=1``.  Never raises.

        Returns:
            Dict with ``status`` (``"ok"`` | ``"down"``), ``platform``,
            ``checked_at`` and ``detail``.
        """
        base: dict[str, Any] = {
            "platform": self.platform_name,
            "checked_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            token = await self.token_cache.get_access_token()
            async with self._client() as client:
                data = await self._get_data(
                    client, STREAMS_ENDPOINT, token, params={"first": 1}
                )
        except TwitchAuthError as exc:
            return {**base, "status": "down", "detail": f"Failed to obtain app access token: {exc}"}
        except StreamFetchError as exc:
            return {**base, "status": "down", "detail": str(exc)}
        return {
            **base,
            "status": "ok",
            "detail": f"Helix API reachable; streams_returned={len(data)}",
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            yield client

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Client-Id": self.token_cache.client_id,
            "Authorization": f"Bearer {token}",
        }

    async def _get_data(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        token: str,
        params: Any,
    ) -> list[Any]:
        """GET a Helix listing and return its ``data`` array.

        Raises:
            StreamFetchError: On transport error, non-2xx status, or a body
                without a ``data`` list.  HTTP 401 also invalidates the
                cached token.
            StreamRateLimitError: On HTTP 429.
        """
        url = f"{TWITCH_API_BASE}{endpoint}"
        try:
            response = await client.get(url, params=params, headers=self._headers(token))
        except httpx.RequestError as exc:
            raise StreamFetchError(
                f"twitch: request error on {endpoint}: {exc}",
                endpoint=endpoint,
            ) from exc

        if response.status_code == 429:
            retry_after = _retry_after_seconds(response)
            raise StreamRateLimitError(
                f"twitch: rate limited on {endpoint}; retry_after={retry_after}s",
                retry_after=retry_after,
                endpoint=endpoint,
            )

        if response.status_code == 401:
            self.token_cache.invalidate()

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StreamFetchError(
                f"twitch: HTTP {exc.response.status_code} on {endpoint}",
                endpoint=endpoint,
                status_code=exc.response.status_code,
            ) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise StreamFetchError(
                f"twitch: invalid JSON on {endpoint}", endpoint=endpoint
            ) from exc

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            raise StreamFetchError(
                f"twitch: response from {endpoint} has no 'data' list",
                endpoint=endpoint,
            )
        return data

    @staticmethod
    def _parse(items: Sequence[Any], model: Any, endpoint: str) -> list[Any]:
        try:
            return [model.model_validate(item) for item in items]
        except ValidationError as exc:
            raise StreamFetchError(
                f"twitch: malformed item in {endpoint} response: "
                f"{exc.error_count()} validation error(s)",
                endpoint=endpoint,
            ) from exc


def _retry_after_seconds(response: httpx.Response) -> float:
    """Seconds until the Helix rate-limit bucket refills.

    Helix reports ``Ratelimit-Reset`` as a Unix timestamp; a plain
    ``Retry-After`` header is honoured when present.
    """
    retry_after = response.headers.get("Retry-After")
    if retry_after is not None:
        try:
            return float(retry_after)
        except ValueError:
            pass
    reset = response.headers.get("Ratelimit-Reset")
    if reset is not None:
        try:
            return max(0.0, float(reset) - datetime.now(timezone.utc).timestamp())
        except ValueError:
            pass
    return 60.0
