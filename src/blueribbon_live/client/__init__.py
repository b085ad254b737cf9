"""Display client: board state, presentation helpers and the polling task."""

from __future__ import annotations

from blueribbon_live.client.board import (
    StreamBoard,
    channel_url,
    format_viewers,
    player_embed_url,
    thumbnail_for,
)
from blueribbon_live.client.poller import StreamPoller
from blueribbon_live.client.sample_data import SAMPLE_STREAMS

__all__ = [
    "SAMPLE_STREAMS",
    "StreamBoard",
    "StreamPoller",
    "channel_url",
    "format_viewers",
    "player_embed_url",
    "thumbnail_for",
]
