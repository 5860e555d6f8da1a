# OAuth Client — Spotify OAuth 2.0 authorization code flow + token refresh.
# Created: 2026-10-18

from __future__ import annotations

import logging
import secrets
import string
import urllib.parse
from typing import Any

import httpx

from tunebridge.auth.models import AccessToken, TokenPair
from tunebridge.config import Credentials
from tunebridge.errors import SpotifyAPIError

logger = logging.getLogger(__name__)


# OAuth 2.0 endpoints for the Spotify accounts service
PROVIDER: dict[str, str] = {
    "auth_url": "https://accounts.spotify.com/authorize",
    "token_url": "https://accounts.spotify.com/api/token",
}

_STATE_ALPHABET = string.ascii_letters + string.digits
MIN_STATE_LENGTH = 16


def generate_state(length: int = MIN_STATE_LENGTH) -> str:
    """Random alphanumeric state for correlating a login with its callback."""
    if length < MIN_STATE_LENGTH:
        raise ValueError(f"State must be at least {MIN_STATE_LENGTH} characters")
    return "".join(secrets.choice(_STATE_ALPHABET) for _ in range(length))


def build_auth_url(client_id: str, redirect_uri: str, scopes: list[str], state: str) -> str:
    """Generate the Spotify authorization URL.

    Args:
        client_id: Spotify application client ID.
        redirect_uri: Where Spotify sends the user after consent.
        scopes: OAuth scopes to request.
        state: Opaque value echoed back on the callback.

    Returns:
        Authorization URL to send the user to.
    """
    params = {
        "response_type": "code",
        "client_id": client_id,
        "scope": " ".join(scopes),
        "redirect_uri": redirect_uri,
        "state": state,
    }
    return f"{PROVIDER['auth_url']}?{urllib.parse.urlencode(params)}"


def parse_auth_url(url: str) -> dict[str, str]:
    """Recover the query parameters of an authorization URL."""
    query = urllib.parse.urlsplit(url).query
    return {k: v[0] for k, v in urllib.parse.parse_qs(query).items()}


def _token_error(resp: httpx.Response) -> SpotifyAPIError:
    try:
        data = resp.json()
    except ValueError:
        data = {}
    error = data.get("error", "") if isinstance(data, dict) else ""
    description = data.get("error_description", "") if isinstance(data, dict) else ""
    message = ": ".join(p for p in (error, description) if p) or f"HTTP {resp.status_code}"
    return SpotifyAPIError(message, status=resp.status_code, reason=error or None)


class OAuthClient:
    """Token endpoint calls for the authorization code and refresh grants.

    Each call is a single POST with HTTP Basic client authentication;
    nothing is retried or cached here.
    """

    def __init__(self, credentials: Credentials, timeout: float = 15):
        self.credentials = credentials
        self.timeout = timeout

    async def _post_token(self, data: dict[str, str]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    PROVIDER["token_url"],
                    data=data,
                    auth=(self.credentials.client_id, self.credentials.client_secret),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as e:
            raise SpotifyAPIError(f"Token request failed: {e}") from e

        if resp.status_code != 200:
            raise _token_error(resp)

        try:
            body = resp.json()
        except ValueError as e:
            raise SpotifyAPIError("Malformed token response", status=resp.status_code) from e

        if not isinstance(body, dict) or not body.get("access_token"):
            raise SpotifyAPIError("Token response missing access_token", status=resp.status_code)
        return body

    async def exchange_code(self, code: str) -> TokenPair:
        """Exchange an authorization code for access + refresh tokens."""
        data = await self._post_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.credentials.redirect_uri,
            }
        )
        if not data.get("refresh_token"):
            raise SpotifyAPIError("Token response missing refresh_token")

        logger.info("Authorization code exchanged for tokens")
        return TokenPair(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_in=int(data.get("expires_in", 3600)),
            scope=data.get("scope", ""),
            token_type=data.get("token_type", "Bearer"),
        )

    async def refresh_access_token(self, refresh_token: str) -> AccessToken:
        """Exchange a refresh token for a new access token."""
        data = await self._post_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            }
        )
        logger.debug("Access token refreshed (expires in %ss)", data.get("expires_in"))
        return AccessToken(
            value=data["access_token"],
            expires_in=int(data.get("expires_in", 3600)),
            refresh_token=data.get("refresh_token"),
        )
