"""Bundled sample streams shown when the stream list API is unreachable."""

from __future__ import annotations

from blueribbon_live.twitch.schemas import EnrichedStream

_DEFAULT_PROFILE_IMAGE = (
    "https://static-cdn.jtvnw.net/jtv_user_pictures/default-profile_image-300x300.png"
)

SAMPLE_STREAMS: tuple[EnrichedStream, ...] = (
    EnrichedStream(
        id="1",
        user_id="1001",
        user_login="streamer1",
        user_name="Streamer One",
        title="BlueRibbon RP - Epic Roleplay Session",
        thumbnail_url="https://static-cdn.jtvnw.net/previews-ttv/live_user_streamer1-{width}x{height}.jpg",
        viewer_count=4250,
        game_name="Grand Theft Auto V",
        started_at="2024-01-01T18:00:00Z",
        profile_image_url=_DEFAULT_PROFILE_IMAGE,
    ),
    EnrichedStream(
        id="2",
        user_id="1002",
        user_login="streamer2",
        user_name="Streamer Two",
        title="BlueRibbon RP - Crime Spree with the Crew!",
        thumbnail_url="https://static-cdn.jtvnw.net/previews-ttv/live_user_streamer2-{width}x{height}.jpg",
        viewer_count=1850,
        game_name="Grand Theft Auto V",
        started_at="2024-01-01T19:30:00Z",
        profile_image_url=_DEFAULT_PROFILE_IMAGE,
    ),
)
