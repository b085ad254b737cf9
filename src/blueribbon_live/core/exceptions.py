"""Application-wide exception hierarchy for BlueRibbon Live.

All custom exceptions subclass ``BlueRibbonError``, so the streams endpoint
can translate the entire hierarchy into a single generic error response.

Hierarchy::

    BlueRibbonError
    ├── TwitchAuthError
    ├── StreamFetchError
    │   └── StreamRateLimitError   (retry_after: float)
    └── MissingCredentialsError
"""

from __future__ import annotations


class BlueRibbonError(Exception):
    """Base class for all BlueRibbon Live exceptions."""


# ---------------------------------------------------------------------------
# Upstream exceptions
# ---------------------------------------------------------------------------


class TwitchAuthError(BlueRibbonError):
    """Raised when an app access token cannot be obtained from Twitch.

    Covers transport failures, non-2xx responses, and token payloads that
    are missing ``access_token`` or a numeric ``expires_in``.

    Args:
        message: Human-readable description of the failure.
        status_code: HTTP status returned by the token endpoint, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StreamFetchError(BlueRibbonError):
    """Raised when the Helix streams or users listing cannot be retrieved.

    When the failure originated in token acquisition the original
    :class:`TwitchAuthError` is chained as ``__cause__``.

    Args:
        message: Human-readable description of the failure.
        endpoint: Helix path that failed (e.g. ``"/streams"``).
        status_code: HTTP status returned by Twitch, if any.
    """

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class StreamRateLimitError(StreamFetchError):
    """Raised when Twitch answers a listing request with HTTP 429.

    Args:
        message: Human-readable description of the rate limit.
        retry_after: Seconds until the rate-limit bucket refills.
        endpoint: Helix path that was rate-limited.
    """

    def __init__(
        self,
        message: str,
        retry_after: float = 60.0,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message, endpoint=endpoint, status_code=429)
        self.retry_after = retry_after


# ---------------------------------------------------------------------------
# Configuration exceptions
# ---------------------------------------------------------------------------


class MissingCredentialsError(BlueRibbonError):
    """Raised when the Twitch client ID or secret is not configured."""

    def __init__(self) -> None:
        super().__init__(
            "Twitch credentials are not configured "
            "(set TWITCH_CLIENT_ID and TWITCH_CLIENT_SECRET)"
        )
