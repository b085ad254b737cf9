"""Display state for the stream board: one featured stream plus the rest.

The featured stream is chosen once, on the first non-empty update, as the
stream with the most viewers.  A viewer may pick another one with
:meth:`StreamBoard.select_featured`; that choice survives later polls for
as long as the stream stays live, after which the top stream is shown.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from urllib.parse import urlencode

from blueribbon_live.twitch.schemas import EnrichedStream

TWITCH_CHANNEL_BASE = "https://twitch.tv"
TWITCH_PLAYER_BASE = "https://player.twitch.tv/"


class StreamBoard:
    """Mutable view model fed by :class:`~blueribbon_live.client.poller.StreamPoller`."""

    def __init__(self) -> None:
        self._streams: list[EnrichedStream] = []
        self._featured_id: Optional[str] = None
        self.loading: bool = True
        self.error: Optional[str] = None

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(self, streams: Iterable[EnrichedStream], error: Optional[str] = None) -> None:
        """Replace the displayed streams.

        Args:
            streams: Streams from the latest poll, in any order.
            error: Message to surface alongside the streams, or ``None`` to
                clear a previous error.
        """
        self._streams = list(streams)
        self.error = error
        self.loading = False
        if self._featured_id is None and self._streams:
            self._featured_id = self.sorted_streams[0].id

    def select_featured(self, stream_id: str) -> None:
        """Promote the stream with *stream_id* to the featured slot.

        Raises:
            KeyError: If no displayed stream has that ID.
        """
        if not any(s.id == stream_id for s in self._streams):
            raise KeyError(stream_id)
        self._featured_id = stream_id

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def streams(self) -> list[EnrichedStream]:
        return list(self._streams)

    @property
    def count(self) -> int:
        return len(self._streams)

    @property
    def sorted_streams(self) -> list[EnrichedStream]:
        return sorted(self._streams, key=lambda s: s.viewer_count, reverse=True)

    @property
    def featured(self) -> Optional[EnrichedStream]:
        ranked = self.sorted_streams
        for stream in ranked:
            if stream.id == self._featured_id:
                return stream
        return ranked[0] if ranked else None

    @property
    def others(self) -> list[EnrichedStream]:
        featured = self.featured
        if featured is None:
            return []
        return [s for s in self.sorted_streams if s.id != featured.id]


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------


def format_viewers(count: Optional[int]) -> str:
    """Format a viewer count for display: ``4250`` → ``"4.3K"``, ``None`` → ``"0"``.

    Thousands are rounded half up like JavaScript's ``toFixed(1)``;
    ``format()`` would round an exact tie such as 4.25 to even.
    """
    if not count or count < 0:
        return "0"
    if count >= 1000:
        thousands = Decimal(count / 1000).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return f"{thousands}K"
    return str(count)


def channel_url(user_login: str) -> str:
    return f"{TWITCH_CHANNEL_BASE}/{user_login}"


def player_embed_url(user_login: str, parent: str = "localhost") -> str:
    """Return the embeddable Twitch player URL for a channel.

    Twitch requires ``parent`` to match the domain hosting the embed.
    """
    return f"{TWITCH_PLAYER_BASE}?{urlencode({'channel': user_login, 'parent': parent})}"


def thumbnail_for(stream: EnrichedStream, width: int = 440, height: int = 248) -> str:
    """Fill the ``{width}``/``{height}`` placeholders of a Helix thumbnail template."""
    return stream.thumbnail_url.replace("{width}", str(width)).replace("{height}", str(height))
