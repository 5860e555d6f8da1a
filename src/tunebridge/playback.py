# Playback Facade — now playing, top tracks, play and pause.
# Created: 2026-10-18

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from tunebridge.auth.tokens import TokenManager
from tunebridge.errors import InvalidRequest, NoActiveDevice, SpotifyAPIError, UpstreamFailure
from tunebridge.integrations.protocol import SpotifyAPIProtocol

logger = logging.getLogger(__name__)

SNAPSHOT_TOP_TRACKS = 10
MAX_TOP_TRACKS = 50


@dataclass(frozen=True)
class TrackSummary:
    name: str
    artist: str
    uri: str

    @classmethod
    def from_track(cls, track: dict[str, Any]) -> TrackSummary:
        artists = ", ".join(a.get("name", "") for a in track.get("artists") or [])
        return cls(name=track.get("name") or "", artist=artists, uri=track.get("uri") or "")


@dataclass
class PlaybackSnapshot:
    """Currently playing item (None when idle) plus the user's top tracks."""

    now_playing: dict[str, Any] | None
    top_tracks: list[TrackSummary] = field(default_factory=list)


class PlaybackFacade:
    """Thin pass-through to Spotify using a freshly derived access token.

    Every operation refreshes the token first, then makes one Spotify call
    (two, concurrently, for the snapshot). Nothing is retried.
    """

    def __init__(self, tokens: TokenManager, api: SpotifyAPIProtocol):
        self._tokens = tokens
        self._api = api

    async def get_current_playback_snapshot(self) -> PlaybackSnapshot:
        token = await self._tokens.obtain_access_token()
        try:
            now_playing, top = await asyncio.gather(
                self._api.fetch_current_track(token),
                self._api.fetch_top_tracks(token, limit=SNAPSHOT_TOP_TRACKS),
            )
        except SpotifyAPIError as e:
            logger.error("Error fetching Spotify data: %s", e)
            raise UpstreamFailure("Failed to fetch Spotify data", detail=str(e)) from e

        return PlaybackSnapshot(
            now_playing=now_playing,
            top_tracks=[TrackSummary.from_track(t) for t in top],
        )

    async def get_top_tracks(self, limit: int = SNAPSHOT_TOP_TRACKS) -> list[TrackSummary]:
        if not 1 <= limit <= MAX_TOP_TRACKS:
            raise InvalidRequest(f"limit must be between 1 and {MAX_TOP_TRACKS}")

        token = await self._tokens.obtain_access_token()
        try:
            tracks = await self._api.fetch_top_tracks(token, limit=limit)
        except SpotifyAPIError as e:
            logger.error("Error fetching top tracks: %s", e)
            raise UpstreamFailure("Failed to fetch top tracks", detail=str(e)) from e
        return [TrackSummary.from_track(t) for t in tracks]

    async def start_playback(self, track_uri: str | None) -> str:
        """Play *track_uri* on the user's active device. Returns the URI."""
        track_uri = (track_uri or "").strip()
        if not track_uri:
            raise InvalidRequest("Track URI is required")

        token = await self._tokens.obtain_access_token()
        try:
            await self._api.play(token, track_uri)
        except SpotifyAPIError as e:
            logger.error("Error starting playback: %s", e)
            if e.is_no_active_device:
                raise NoActiveDevice() from e
            raise UpstreamFailure("Failed to start playback", detail=str(e)) from e
        return track_uri

    async def pause_playback(self) -> None:
        token = await self._tokens.obtain_access_token()
        try:
            await self._api.pause(token)
        except SpotifyAPIError as e:
            logger.error("Error pausing playback: %s", e)
            raise UpstreamFailure("Failed to pause playback", detail=str(e)) from e
