# Spotify capability protocol — the only surface the core logic depends on.
# Created: 2026-10-18

from __future__ import annotations

from typing import Any, Protocol

from tunebridge.auth.models import AccessToken, TokenPair


class SpotifyAPIProtocol(Protocol):
    """Operations the bridge needs from Spotify.

    Implementations raise ``SpotifyAPIError`` for any upstream or transport
    failure. Swap in a fake for tests.
    """

    async def fetch_current_track(self, token: AccessToken) -> dict[str, Any] | None:
        """Return the currently playing item, or None if nothing is playing."""
        ...

    async def fetch_top_tracks(self, token: AccessToken, limit: int = 10) -> list[dict[str, Any]]:
        """Return the user's top track objects."""
        ...

    async def play(self, token: AccessToken, uri: str) -> None:
        """Start playback of a single track URI on the active device."""
        ...

    async def pause(self, token: AccessToken) -> None:
        """Pause playback on the active device."""
        ...

    async def refresh_access_token(self, refresh_token: str) -> AccessToken:
        """Exchange a refresh token for a fresh access token."""
        ...

    async def exchange_code(self, code: str) -> TokenPair:
        """Exchange an authorization code for a token pair."""
        ...
