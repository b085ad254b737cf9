"""Tests for the StreamBoard display state and presentation helpers.

Covers:
- Featured stream chosen on first non-empty update as the top stream
- User-selected featured stream survives later updates while live
- Featured falls back to the top stream when the selection goes offline
- others excludes the featured stream and is sorted by viewers
- format_viewers(), player_embed_url(), channel_url(), thumbnail_for()
"""

from __future__ import annotations

import pytest

from blueribbon_live.client.board import (
    StreamBoard,
    channel_url,
    format_viewers,
    player_embed_url,
    thumbnail_for,
)
from blueribbon_live.twitch.schemas import EnrichedStream


def _stream(stream_id: str, viewers: int) -> EnrichedStream:
    return EnrichedStream(
        id=stream_id,
        user_id=f"u{stream_id}",
        user_login=f"login{stream_id}",
        title="BlueRibbon RP",
        thumbnail_url="https://static-cdn.jtvnw.net/previews-ttv/live_user_x-{width}x{height}.jpg",
        viewer_count=viewers,
    )


class TestStreamBoard:
    def test_initial_state(self) -> None:
        board = StreamBoard()

        assert board.loading is True
        assert board.error is None
        assert board.featured is None
        assert board.others == []
        assert board.count == 0

    def test_first_update_features_top_stream(self) -> None:
        board = StreamBoard()

        board.update([_stream("a", 10), _stream("b", 50), _stream("c", 30)])

        assert board.loading is False
        assert board.featured.id == "b"
        assert [s.id for s in board.others] == ["c", "a"]
        assert board.count == 3

    def test_selected_featured_survives_updates(self) -> None:
        board = StreamBoard()
        board.update([_stream("a", 10), _stream("b", 50)])

        board.select_featured("a")
        board.update([_stream("a", 12), _stream("b", 60), _stream("c", 5)])

        assert board.featured.id == "a"
        assert board.featured.viewer_count == 12
        assert [s.id for s in board.others] == ["b", "c"]

    def test_featured_falls_back_when_selection_goes_offline(self) -> None:
        board = StreamBoard()
        board.update([_stream("a", 10), _stream("b", 50)])
        board.select_featured("a")

        board.update([_stream("b", 50), _stream("c", 70)])

        assert board.featured.id == "c"
        assert [s.id for s in board.others] == ["b"]

    def test_featured_kept_when_top_stream_changes(self) -> None:
        """The first top stream stays featured even if another overtakes it."""
        board = StreamBoard()
        board.update([_stream("a", 50), _stream("b", 10)])

        board.update([_stream("a", 50), _stream("b", 90)])

        assert board.featured.id == "a"

    def test_select_unknown_stream_raises(self) -> None:
        board = StreamBoard()
        board.update([_stream("a", 1)])

        with pytest.raises(KeyError):
            board.select_featured("zzz")

    def test_update_records_and_clears_error(self) -> None:
        board = StreamBoard()

        board.update([_stream("a", 1)], error="Stream service unreachable")
        assert board.error == "Stream service unreachable"

        board.update([_stream("a", 1)])
        assert board.error is None

    def test_empty_update(self) -> None:
        board = StreamBoard()

        board.update([])

        assert board.loading is False
        assert board.featured is None
        assert board.others == []


class TestPresentationHelpers:
    @pytest.mark.parametrize(
        ("count", "expected"),
        [
            (None, "0"),
            (0, "0"),
            (-5, "0"),
            (999, "999"),
            (1000, "1.0K"),
            (1500, "1.5K"),
            (1250, "1.3K"),
            (4250, "4.3K"),
            (1999, "2.0K"),
            (12345, "12.3K"),
        ],
    )
    def test_format_viewers(self, count, expected) -> None:
        assert format_viewers(count) == expected

    def test_channel_url(self) -> None:
        assert channel_url("afro") == "https://twitch.tv/afro"

    def test_player_embed_url(self) -> None:
        url = player_embed_url("afro", parent="blueribbon.example")

        assert url == "https://player.twitch.tv/?channel=afro&parent=blueribbon.example"

    def test_player_embed_url_defaults_to_localhost(self) -> None:
        assert player_embed_url("afro").endswith("parent=localhost")

    def test_thumbnail_for_fills_dimensions(self) -> None:
        url = thumbnail_for(_stream("a", 1), width=320, height=180)

        assert url.endswith("live_user_x-320x180.jpg")
