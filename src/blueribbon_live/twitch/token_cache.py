"""App access token cache for the Twitch Client Credentials grant.

The cache holds a single :class:`Credential`.  A token is handed out only
while ``clock() < expires_at``, where ``expires_at`` is computed at refresh
time as ``now + max(expires_in - safety_margin, expires_in / 2)``, so a
lifetime shorter than the margin is still usable for half its length.
A non-positive ``expires_in`` is rejected as malformed.  Refreshes are
serialised with an :class:`asyncio.Lock`, so a burst of concurrent requests
arriving with an expired credential triggers one token request.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from blueribbon_live.core.exceptions import TwitchAuthError
from blueribbon_live.twitch.config import (
    DEFAULT_SAFETY_MARGIN_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    TWITCH_TOKEN_URL,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Credential:
    """A cached app access token and the monotonic time it stops being usable."""

    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class AppTokenCache:
    """Obtains and caches a Twitch app access token.

    Args:
        client_id: Twitch application Client ID.
        client_secret: Twitch application client secret.
        safety_margin: Seconds subtracted from the reported token lifetime.
        http_client: Optional injected :class:`httpx.AsyncClient`.  When
            omitted a short-lived client is opened per refresh.
        timeout: Request timeout used when no client is injected.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        safety_margin: float = DEFAULT_SAFETY_MARGIN_SECONDS,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client_id = client_id
        self._client_secret = client_secret
        self._safety_margin = safety_margin
        self._http_client = http_client
        self._timeout = timeout
        self._clock = clock
        self._credential: Credential | None = None
        self._lock = asyncio.Lock()

    @property
    def credential(self) -> Credential | None:
        return self._credential

    def invalidate(self) -> None:
        """Drop the cached credential so the next call re-authenticates."""
        if self._credential is not None:
            logger.info("twitch_token_invalidated")
        self._credential = None

    async def get_access_token(self) -> str:
        """Return a valid app access token, refreshing it when necessary.

        Returns:
            The bearer token string.

        Raises:
            TwitchAuthError: If the token request fails or the response is
                malformed.  The cached credential is left unchanged.
        """
        credential = self._credential
        if credential is not None and credential.is_valid(self._clock()):
            return credential.token

        async with self._lock:
            # Another coroutine may have refreshed while we waited.
            credential = self._credential
            if credential is not None and credential.is_valid(self._clock()):
                return credential.token

            self._credential = await self._request_credential()
            return self._credential.token

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request_credential(self) -> Credential:
        form = {
            "client_id": self.client_id,
            "client_secret": self._client_secret,
            "grant_type": "client_credentials",
        }
        try:
            if self._http_client is not None:
                response = await self._http_client.post(TWITCH_TOKEN_URL, data=form)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(TWITCH_TOKEN_URL, data=form)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TwitchAuthError(
                f"twitch: token request failed: HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise TwitchAuthError(
                f"twitch: connection error obtaining app access token: {exc}"
            ) from exc

        now = self._clock()
        token, expires_in = self._parse_token_payload(response)
        logger.info("twitch_token_refreshed", expires_in=expires_in)
        # Short-lived tokens keep at least half their lifetime.
        lifetime = max(expires_in - self._safety_margin, expires_in / 2)
        return Credential(token=token, expires_at=now + lifetime)

    @staticmethod
    def _parse_token_payload(response: httpx.Response) -> tuple[str, float]:
        try:
            data: Any = response.json()
        except ValueError as exc:
            raise TwitchAuthError("twitch: token response is not valid JSON") from exc

        if not isinstance(data, dict):
            raise TwitchAuthError("twitch: token response is not a JSON object")

        token = data.get("access_token")
        if not token or not isinstance(token, str):
            raise TwitchAuthError("twitch: token response missing 'access_token' field")

        expires_in = data.get("expires_in")
        if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)):
            raise TwitchAuthError("twitch: token response missing numeric 'expires_in' field")
        if expires_in <= 0:
            raise TwitchAuthError(
                f"twitch: token response has non-positive expires_in={expires_in}"
            )

        return token, float(expires_in)
