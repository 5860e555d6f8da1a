# Spotify playback schemas.
# Created: 2026-10-18

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from tunebridge.api.schemas.common import APIResponse, StatusResponse


class Track(APIResponse):
    """Top track projection: artist names are comma-joined."""

    name: str
    artist: str
    uri: str


class SnapshotResponse(APIResponse):
    """GET /spotify response."""

    model_config = {"from_attributes": True, "populate_by_name": True}

    now_playing: dict[str, Any] | None = Field(default=None, alias="nowPlaying")
    top_tracks: list[Track] = Field(default_factory=list, alias="topTracks")


class TopTracksResponse(APIResponse):
    model_config = {"from_attributes": True, "populate_by_name": True}

    top_tracks: list[Track] = Field(default_factory=list, alias="topTracks")


class PlayRequest(BaseModel):
    uri: str | None = None


class PlayResponse(StatusResponse):
    uri: str
