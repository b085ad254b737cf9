"""Timer-driven poller that keeps a :class:`StreamBoard` up to date.

The poller fetches ``GET /api/streams`` immediately and then on a fixed
``interval`` cadence until stopped.  On any failure (network error,
non-2xx status, malformed body) the board shows the bundled sample
streams together with a non-blocking error message.  An unexpected
exception in a poll is logged and the task keeps running.

Usage::

    board = StreamBoard()
    async with StreamPoller(board, "http://localhost:5000/api/streams"):
        ...  # render board.featured / board.others as they change
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Sequence
from types import TracebackType
from typing import Optional

import httpx
import structlog

from blueribbon_live.client.board import StreamBoard
from blueribbon_live.client.sample_data import SAMPLE_STREAMS
from blueribbon_live.config.settings import Settings, get_settings
from blueribbon_live.twitch.schemas import EnrichedStream, StreamListResponse

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL: float = 30.0
DEFAULT_REQUEST_TIMEOUT: float = 5.0


class StreamPoller:
    """Polls the stream list API and feeds the results into a board.

    Args:
        board: Display state to update.
        endpoint_url: Absolute URL of ``GET /api/streams``.
        interval: Seconds between polls.
        http_client: Optional injected :class:`httpx.AsyncClient`.  When
            omitted the poller owns a client for its running lifetime.
        fallback: Streams shown when a poll fails.
        timeout: Per-request timeout used when the poller owns its client.
    """

    def __init__(
        self,
        board: StreamBoard,
        endpoint_url: str,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        http_client: httpx.AsyncClient | None = None,
        fallback: Sequence[EnrichedStream] = SAMPLE_STREAMS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.board = board
        self.endpoint_url = endpoint_url
        self.interval = interval
        self.fallback = tuple(fallback)
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None
        self._task: Optional[asyncio.Task[None]] = None

    @classmethod
    def from_settings(
        cls,
        board: StreamBoard,
        base_url: str,
        settings: Settings | None = None,
    ) -> StreamPoller:
        """Build a poller for the API at *base_url* using the configured interval."""
        settings = settings if settings is not None else get_settings()
        return cls(
            board,
            f"{base_url.rstrip('/')}/api/streams",
            interval=settings.poll_interval_seconds,
        )

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> list[EnrichedStream]:
        """Fetch the stream list once and update the board.

        Returns:
            The streams now shown on the board (the fallback on failure).
        """
        client = self._client()
        try:
            response = await client.get(self.endpoint_url)
            response.raise_for_status()
            payload = StreamListResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            return self._show_fallback(
                f"Stream service returned HTTP {exc.response.status_code}"
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return self._show_fallback(f"Stream service unreachable: {exc}")
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError both land here.
            logger.debug("stream_poll_bad_payload", error=str(exc))
            return self._show_fallback("Stream service returned an invalid response")

        self.board.update(payload.streams)
        logger.debug("stream_poll_succeeded", count=len(payload.streams))
        return payload.streams

    def start(self) -> None:
        """Begin polling in a background task.  No-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="stream-poller")

    async def stop(self) -> None:
        """Cancel the polling task and release the owned HTTP client."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> StreamPoller:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        # Ticks are scheduled from the start time so request latency does
        # not stretch the period.
        loop = asyncio.get_running_loop()
        next_at = loop.time()
        while True:
            try:
                await self.poll_once()
            except Exception as exc:
                logger.exception("stream_poll_crashed")
                self._show_fallback(f"Stream poll failed: {type(exc).__name__}")
            next_at += self.interval
            await asyncio.sleep(max(0.0, next_at - loop.time()))

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    def _show_fallback(self, message: str) -> list[EnrichedStream]:
        logger.warning("stream_poll_failed", error=message, fallback=len(self.fallback))
        self.board.update(self.fallback, error=message)
        return list(self.fallback)
