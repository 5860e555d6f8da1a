# Shared fixtures: settings built in code and an in-memory Spotify fake.
# Created: 2026-10-18

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from tunebridge.auth.models import AccessToken, TokenPair
from tunebridge.config import Settings
from tunebridge.errors import SpotifyAPIError


class FakeSpotifyAPI:
    """In-memory SpotifyAPIProtocol implementation that records every call."""

    def __init__(self):
        self.calls: list[tuple[str, Any]] = []
        self.current_track: dict[str, Any] | None = None
        self.top_tracks: list[dict[str, Any]] = []
        self.errors: dict[str, SpotifyAPIError] = {}
        self._issued = 0

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def _record(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        if name in self.errors:
            raise self.errors[name]

    async def refresh_access_token(self, refresh_token: str) -> AccessToken:
        self._record("refresh", refresh_token)
        self._issued += 1
        return AccessToken(value=f"access-{self._issued}", expires_in=3600)

    async def exchange_code(self, code: str) -> TokenPair:
        self._record("exchange", code)
        return TokenPair(access_token="access-from-code", refresh_token="refresh-from-code")

    async def fetch_current_track(self, token: AccessToken) -> dict[str, Any] | None:
        self._record("current", token.value)
        return self.current_track

    async def fetch_top_tracks(self, token: AccessToken, limit: int = 10) -> list[dict[str, Any]]:
        self._record("top", (token.value, limit))
        return self.top_tracks[:limit]

    async def play(self, token: AccessToken, uri: str) -> None:
        self._record("play", (token.value, uri))

    async def pause(self, token: AccessToken) -> None:
        self._record("pause", token.value)


@pytest.fixture
def settings():
    return Settings(
        spotify_client_id="client-123",
        spotify_client_secret="secret-456",
        spotify_refresh_token="refresh-789",
    )


@pytest.fixture
def credentials(settings):
    return settings.credentials()


@pytest.fixture
def fake_api():
    return FakeSpotifyAPI()


@pytest.fixture
def test_app(settings, fake_api):
    from tunebridge.api.server import create_app

    return create_app(settings, spotify_api=fake_api)


@pytest.fixture
def client(test_app):
    return TestClient(test_app)
