"""Shared pytest fixtures for BlueRibbon Live tests.

Fixture summary
---------------
settings        - Settings with dummy Twitch credentials.
fake_clock      - Manually advanced monotonic clock for the token cache.
token_cache     - AppTokenCache wired to ``fake_clock``.
fetcher         - StreamFetcher using ``token_cache``.

All HTTP traffic is mocked with respx; no network connection is required.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Test environment bootstrap
# ---------------------------------------------------------------------------
# Set env vars before any application modules are imported so that the
# module-level ``app`` singleton is built with test values.

_TEST_ENV_DEFAULTS: dict[str, str] = {
    "TWITCH_CLIENT_ID": "test-client-id",
    "TWITCH_CLIENT_SECRET": "test-client-secret",
    "LOG_LEVEL": "WARNING",
}

for _key, _default in _TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _default)

from blueribbon_live.config.settings import Settings, get_settings  # noqa: E402
from blueribbon_live.twitch.fetcher import StreamFetcher  # noqa: E402
from blueribbon_live.twitch.token_cache import AppTokenCache  # noqa: E402

get_settings.cache_clear()

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "api_responses" / "twitch"

TEST_CLIENT_ID = "test-client-id"
TEST_CLIENT_SECRET = "test-client-secret"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a recorded Helix response from ``tests/fixtures/api_responses/twitch``."""
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return Settings(
        twitch_client_id=TEST_CLIENT_ID,
        twitch_client_secret=TEST_CLIENT_SECRET,
        log_level="WARNING",
        _env_file=None,
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_cache(fake_clock: FakeClock) -> AppTokenCache:
    return AppTokenCache(TEST_CLIENT_ID, TEST_CLIENT_SECRET, clock=fake_clock)


@pytest.fixture
def fetcher(token_cache: AppTokenCache) -> StreamFetcher:
    return StreamFetcher(token_cache)


@pytest.fixture
def streams_payload() -> dict[str, Any]:
    """Recorded ``GET /streams`` body: two marker streams and one "Just Chatting"."""
    return load_fixture("streams_response.json")


@pytest.fixture
def users_payload() -> dict[str, Any]:
    """Recorded ``GET /users`` body for the two marker broadcasters."""
    return load_fixture("users_response.json")
