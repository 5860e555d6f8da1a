# Tests for the Spotify Web API client (integrations/spotify.py)
# Created: 2026-10-18

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tunebridge.auth.models import AccessToken
from tunebridge.errors import SpotifyAPIError
from tunebridge.integrations.spotify import SpotifyClient

TOKEN = AccessToken(value="tok")


def make_track(name, *artists):
    return {"name": name, "artists": [{"name": a} for a in artists], "uri": f"spotify:track:{name}"}


def _mock_http(mock_cls, **methods):
    mock_client = AsyncMock()
    for name, value in methods.items():
        setattr(mock_client, name, value)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_cls.return_value = mock_client
    return mock_client


async def test_current_track_playing(credentials):
    item = make_track("Bohemian Rhapsody", "Queen")
    resp = httpx.Response(200, json={"is_playing": True, "item": item})
    with patch("httpx.AsyncClient") as mock_cls:
        mock_client = _mock_http(mock_cls, request=AsyncMock(return_value=resp))
        result = await SpotifyClient(credentials).fetch_current_track(TOKEN)

    assert result == item
    method, url = mock_client.request.call_args[0]
    assert method == "GET"
    assert url.endswith("/me/player/currently-playing")
    assert mock_client.request.call_args[1]["headers"] == {"Authorization": "Bearer tok"}


async def test_current_track_nothing_playing(credentials):
    with patch("httpx.AsyncClient") as mock_cls:
        _mock_http(mock_cls, request=AsyncMock(return_value=httpx.Response(204)))
        result = await SpotifyClient(credentials).fetch_current_track(TOKEN)

    assert result is None


async def test_current_track_empty_item(credentials):
    resp = httpx.Response(200, json={"is_playing": False, "item": None})
    with patch("httpx.AsyncClient") as mock_cls:
        _mock_http(mock_cls, request=AsyncMock(return_value=resp))
        result = await SpotifyClient(credentials).fetch_current_track(TOKEN)

    assert result is None


async def test_top_tracks(credentials):
    items = [make_track("One", "A"), make_track("Two", "B", "C")]
    resp = httpx.Response(200, json={"items": items})
    with patch("httpx.AsyncClient") as mock_cls:
        mock_client = _mock_http(mock_cls, request=AsyncMock(return_value=resp))
        result = await SpotifyClient(credentials).fetch_top_tracks(TOKEN, limit=10)

    assert result == items
    assert mock_client.request.call_args[1]["params"] == {"limit": 10}


async def test_top_tracks_limit_capped(credentials):
    resp = httpx.Response(200, json={"items": []})
    with patch("httpx.AsyncClient") as mock_cls:
        mock_client = _mock_http(mock_cls, request=AsyncMock(return_value=resp))
        await SpotifyClient(credentials).fetch_top_tracks(TOKEN, limit=200)

    assert mock_client.request.call_args[1]["params"] == {"limit": 50}


async def test_current_track_non_object_body(credentials):
    with patch("httpx.AsyncClient") as mock_cls:
        _mock_http(mock_cls, request=AsyncMock(return_value=httpx.Response(200, json=["oops"])))
        with pytest.raises(SpotifyAPIError, match="Malformed currently-playing"):
            await SpotifyClient(credentials).fetch_current_track(TOKEN)


@pytest.mark.parametrize("body", [["oops"], "oops", 42, {"items": "oops"}])
async def test_top_tracks_non_object_body(credentials, body):
    with patch("httpx.AsyncClient") as mock_cls:
        _mock_http(mock_cls, request=AsyncMock(return_value=httpx.Response(200, json=body)))
        with pytest.raises(SpotifyAPIError, match="Malformed top tracks") as exc_info:
            await SpotifyClient(credentials).fetch_top_tracks(TOKEN)

    assert exc_info.value.status == 200


async def test_play_sends_uri(credentials):
    with patch("httpx.AsyncClient") as mock_cls:
        mock_client = _mock_http(mock_cls, request=AsyncMock(return_value=httpx.Response(204)))
        await SpotifyClient(credentials).play(TOKEN, "spotify:track:abc")

    method, url = mock_client.request.call_args[0]
    assert method == "PUT"
    assert url.endswith("/me/player/play")
    assert mock_client.request.call_args[1]["json"] == {"uris": ["spotify:track:abc"]}


async def test_play_no_active_device(credentials):
    resp = httpx.Response(
        404,
        json={
            "error": {
                "status": 404,
                "message": "Player command failed: No active device found",
                "reason": "NO_ACTIVE_DEVICE",
            }
        },
    )
    with patch("httpx.AsyncClient") as mock_cls:
        _mock_http(mock_cls, request=AsyncMock(return_value=resp))
        with pytest.raises(SpotifyAPIError) as exc_info:
            await SpotifyClient(credentials).play(TOKEN, "spotify:track:abc")

    err = exc_info.value
    assert err.status == 404
    assert err.reason == "NO_ACTIVE_DEVICE"
    assert err.is_no_active_device


async def test_pause_unauthorized(credentials):
    resp = httpx.Response(
        401, json={"error": {"status": 401, "message": "The access token expired"}}
    )
    with patch("httpx.AsyncClient") as mock_cls:
        _mock_http(mock_cls, request=AsyncMock(return_value=resp))
        with pytest.raises(SpotifyAPIError) as exc_info:
            await SpotifyClient(credentials).pause(TOKEN)

    assert exc_info.value.status == 401
    assert "expired" in exc_info.value.message
    assert not exc_info.value.is_no_active_device


async def test_transport_error_wrapped(credentials):
    with patch("httpx.AsyncClient") as mock_cls:
        _mock_http(mock_cls, request=AsyncMock(side_effect=httpx.ReadTimeout("slow")))
        with pytest.raises(SpotifyAPIError, match="slow"):
            await SpotifyClient(credentials).pause(TOKEN)


async def test_token_calls_delegate_to_oauth(credentials):
    client = SpotifyClient(credentials)
    with patch(
        "tunebridge.integrations.oauth.OAuthClient.refresh_access_token",
        new_callable=AsyncMock,
        return_value=AccessToken(value="new"),
    ) as mock_refresh:
        token = await client.refresh_access_token("ref")

    assert token.value == "new"
    mock_refresh.assert_awaited_once_with("ref")
