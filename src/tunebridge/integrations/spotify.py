# Spotify Client — HTTP client for the Spotify Web API.
# Created: 2026-10-18
#
# Implements SpotifyAPIProtocol over httpx. Player and library calls take the
# access token explicitly; token endpoint calls are delegated to OAuthClient.

from __future__ import annotations

import logging
from typing import Any

import httpx

from tunebridge.auth.models import AccessToken, TokenPair
from tunebridge.config import Credentials
from tunebridge.errors import SpotifyAPIError
from tunebridge.integrations.oauth import OAuthClient

logger = logging.getLogger(__name__)

_SPOTIFY_BASE = "https://api.spotify.com/v1"

_OK_STATUSES = (200, 202, 204)


def _api_error(resp: httpx.Response) -> SpotifyAPIError:
    """Build an error from a Spotify Web API error body.

    Spotify reports ``{"error": {"status", "message", "reason"}}``; ``reason``
    is only present on player endpoints.
    """
    message = f"HTTP {resp.status_code}"
    reason = None
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            message = err.get("message") or message
            reason = err.get("reason")
        elif isinstance(err, str):
            message = err
    return SpotifyAPIError(message, status=resp.status_code, reason=reason)


class SpotifyClient:
    """HTTP client for the Spotify Web API.

    Every method performs exactly one request; nothing is retried.
    """

    def __init__(self, credentials: Credentials, timeout: float = 10):
        self._oauth = OAuthClient(credentials)
        self.timeout = timeout

    async def _request(
        self,
        method: str,
        path: str,
        token: AccessToken,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {token.value}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.request(
                    method, f"{_SPOTIFY_BASE}{path}", headers=headers, **kwargs
                )
        except httpx.HTTPError as e:
            raise SpotifyAPIError(f"Spotify request failed: {e}") from e

        if resp.status_code not in _OK_STATUSES:
            raise _api_error(resp)
        return resp

    async def fetch_current_track(self, token: AccessToken) -> dict[str, Any] | None:
        """Get the currently playing item.

        Returns:
            The raw track (or episode) object, or None if nothing is playing.
        """
        resp = await self._request("GET", "/me/player/currently-playing", token)
        if resp.status_code == 204 or not resp.content:
            return None

        try:
            data = resp.json()
        except ValueError as e:
            raise SpotifyAPIError("Malformed currently-playing response", status=resp.status_code) from e
        if not isinstance(data, dict):
            raise SpotifyAPIError("Malformed currently-playing response", status=resp.status_code)
        return data.get("item") or None

    async def fetch_top_tracks(self, token: AccessToken, limit: int = 10) -> list[dict[str, Any]]:
        """Get the user's top tracks.

        Args:
            token: Access token for this request.
            limit: Number of tracks (Spotify caps this at 50).

        Returns:
            List of raw track objects.
        """
        resp = await self._request(
            "GET", "/me/top/tracks", token, params={"limit": min(limit, 50)}
        )
        try:
            data = resp.json()
        except ValueError as e:
            raise SpotifyAPIError("Malformed top tracks response", status=resp.status_code) from e
        if not isinstance(data, dict) or not isinstance(data.get("items", []), list):
            raise SpotifyAPIError("Malformed top tracks response", status=resp.status_code)
        return data.get("items", [])

    async def play(self, token: AccessToken, uri: str) -> None:
        await self._request("PUT", "/me/player/play", token, json={"uris": [uri]})
        logger.info("Playback started: %s", uri)

    async def pause(self, token: AccessToken) -> None:
        await self._request("PUT", "/me/player/pause", token)
        logger.info("Playback paused")

    async def refresh_access_token(self, refresh_token: str) -> AccessToken:
        return await self._oauth.refresh_access_token(refresh_token)

    async def exchange_code(self, code: str) -> TokenPair:
        return await self._oauth.exchange_code(code)
