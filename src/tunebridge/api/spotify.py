# Spotify router — now playing, top tracks and playback control.
# Created: 2026-10-18

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from tunebridge.api.deps import get_playback
from tunebridge.api.schemas.common import ErrorResponse, StatusResponse
from tunebridge.api.schemas.spotify import (
    PlayRequest,
    PlayResponse,
    SnapshotResponse,
    TopTracksResponse,
    Track,
)
from tunebridge.errors import TuneBridgeError
from tunebridge.playback import PlaybackFacade

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spotify", tags=["Spotify"])

_ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _error_response(e: TuneBridgeError, fallback: str) -> JSONResponse:
    """Client errors keep their message; server-side ones use the route's generic text."""
    message = e.message if e.status_code < 500 else fallback
    return JSONResponse(status_code=e.status_code, content={"error": message})


@router.get("", response_model=SnapshotResponse, responses=_ERRORS)
async def get_snapshot(playback: PlaybackFacade = Depends(get_playback)):
    """Return the currently playing item and the top 10 tracks."""
    try:
        snapshot = await playback.get_current_playback_snapshot()
    except TuneBridgeError as e:
        return _error_response(e, "Failed to fetch Spotify data")

    return SnapshotResponse(
        now_playing=snapshot.now_playing,
        top_tracks=[Track.model_validate(t) for t in snapshot.top_tracks],
    )


@router.get("/top-tracks", response_model=TopTracksResponse, responses=_ERRORS)
async def get_top_tracks(
    limit: int = Query(10),
    playback: PlaybackFacade = Depends(get_playback),
):
    try:
        tracks = await playback.get_top_tracks(limit)
    except TuneBridgeError as e:
        return _error_response(e, "Failed to fetch top tracks")

    return TopTracksResponse(top_tracks=[Track.model_validate(t) for t in tracks])


@router.post("/play", response_model=PlayResponse, responses=_ERRORS)
async def play(
    body: PlayRequest | None = Body(None),
    playback: PlaybackFacade = Depends(get_playback),
):
    """Start playback of ``{"uri": "spotify:track:..."}`` on the active device."""
    try:
        uri = await playback.start_playback(body.uri if body else None)
    except TuneBridgeError as e:
        return _error_response(e, "Failed to start playback")

    return PlayResponse(status="Playing track", uri=uri)


@router.post("/pause", response_model=StatusResponse, responses=_ERRORS)
async def pause(playback: PlaybackFacade = Depends(get_playback)):
    try:
        await playback.pause_playback()
    except TuneBridgeError as e:
        return _error_response(e, "Failed to pause playback")

    return StatusResponse(status="Playback paused")
