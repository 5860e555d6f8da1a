# Token Manager — refresh-token to access-token exchange.
# Created: 2026-10-18

from __future__ import annotations

import logging

from tunebridge.auth.models import AccessToken
from tunebridge.errors import AuthenticationFailure, ConfigurationError, SpotifyAPIError
from tunebridge.integrations.protocol import SpotifyAPIProtocol

logger = logging.getLogger(__name__)


class TokenManager:
    """Derives a fresh access token from the configured refresh token.

    There is no caching: every call is one round trip to the Spotify token
    endpoint, and the result is meant for a single request.
    """

    def __init__(self, api: SpotifyAPIProtocol, refresh_token: str | None):
        self._api = api
        self._refresh_token = refresh_token or None

    @property
    def configured(self) -> bool:
        return self._refresh_token is not None

    async def obtain_access_token(self) -> AccessToken:
        """Exchange the configured refresh token for a new access token.

        Raises:
            ConfigurationError: No refresh token is configured.
            AuthenticationFailure: The exchange failed.
        """
        if not self._refresh_token:
            raise ConfigurationError(
                "SPOTIFY_REFRESH_TOKEN is not configured. Complete /auth/login first."
            )
        return await self.refresh(self._refresh_token)

    async def refresh(self, refresh_token: str) -> AccessToken:
        """Exchange an explicit refresh token. Single attempt."""
        try:
            token = await self._api.refresh_access_token(refresh_token)
        except SpotifyAPIError as e:
            logger.error("Failed to refresh access token: %s", e)
            raise AuthenticationFailure("Spotify authentication failed", detail=str(e)) from e

        if token.refresh_token and token.refresh_token != refresh_token:
            logger.warning(
                "Spotify rotated the refresh token; update SPOTIFY_REFRESH_TOKEN to keep access"
            )
        return token
