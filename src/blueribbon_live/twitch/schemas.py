"""Pydantic schemas for Twitch Helix payloads and the enriched stream output.

``StreamRecord`` and ``UserProfile`` validate the subset of Helix fields the
application uses; unknown upstream fields are ignored.  ``EnrichedStream`` is
the frozen record returned by ``GET /api/streams`` and consumed by the
display client.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StreamRecord(BaseModel):
    """One item of the Helix ``GET /streams`` ``data`` array.

    Attributes:
        id: Stream ID.
        user_id: Broadcaster user ID (join key for :class:`UserProfile`).
        user_login: Broadcaster login, used for channel and player URLs.
        user_name: Broadcaster display name.
        title: Stream title; matched against the title marker.
        thumbnail_url: Preview template containing ``{width}``/``{height}``.
        viewer_count: Current viewers.
        game_name: Category name.
        started_at: ISO 8601 start timestamp as reported by Twitch.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    user_id: str
    user_login: str = ""
    user_name: str = ""
    title: str = ""
    thumbnail_url: str = ""
    viewer_count: int = Field(default=0, ge=0)
    game_name: str = ""
    started_at: str = ""


class UserProfile(BaseModel):
    """One item of the Helix ``GET /users`` ``data`` array."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    profile_image_url: Optional[str] = None


class EnrichedStream(StreamRecord):
    """A stream joined with its broadcaster's profile image.

    ``profile_image_url`` is ``None`` when Twitch returned no profile for the
    broadcaster.
    """

    profile_image_url: Optional[str] = None


class StreamListResponse(BaseModel):
    """Body of a successful ``GET /api/streams`` response."""

    streams: list[EnrichedStream]


class ErrorResponse(BaseModel):
    """Body of a failed ``GET /api/streams`` response."""

    error: str
