# Error taxonomy — every failure the bridge can surface to a caller.
# Created: 2026-10-18
#
# Each error carries the HTTP status it renders with at the request boundary.

from __future__ import annotations

from collections.abc import Mapping


class TuneBridgeError(Exception):
    """Base class for errors rendered as structured responses."""

    status_code: int = 500

    def __init__(self, message: str, *, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ConfigurationError(TuneBridgeError):
    """Required credentials or tokens are not configured."""


class AuthorizationDenied(TuneBridgeError):
    """The user declined consent, or Spotify reported an OAuth error."""

    status_code = 400

    def __init__(self, error: str, description: str | None = None):
        super().__init__(f"Spotify authorization failed: {error}", detail=description)
        self.error = error
        self.description = description


class MissingAuthorizationCode(TuneBridgeError):
    """The callback arrived without an authorization code."""

    status_code = 400

    def __init__(self, params: Mapping[str, str] | None = None):
        super().__init__("No authorization code was received from Spotify.")
        self.params = dict(params or {})


class InvalidState(TuneBridgeError):
    """The callback state was never issued, has expired, or was already used."""

    status_code = 400

    def __init__(self, state: str | None = None):
        super().__init__("The authorization state is unknown or has expired. Start the login again.")
        self.state = state


class TokenExchangeFailure(TuneBridgeError):
    """Exchanging the authorization code for tokens failed."""


class AuthenticationFailure(TuneBridgeError):
    """Exchanging the refresh token for an access token failed."""


class NoActiveDevice(TuneBridgeError):
    """Spotify has no active device to play on. Fixable by the user."""

    status_code = 400

    def __init__(self):
        super().__init__(
            "No active Spotify device. Open Spotify on your phone or computer "
            "and play a song once."
        )


class InvalidRequest(TuneBridgeError):
    """Caller input failed validation."""

    status_code = 400


class UpstreamFailure(TuneBridgeError):
    """Any other Spotify Web API failure."""


class SpotifyAPIError(Exception):
    """Low-level error from the Spotify HTTP client.

    ``status`` is the HTTP status (0 for transport errors), ``reason`` the
    Spotify player error reason (e.g. ``NO_ACTIVE_DEVICE``) when present.
    """

    def __init__(self, message: str, status: int = 0, reason: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.reason = reason

    @property
    def is_no_active_device(self) -> bool:
        return self.reason == "NO_ACTIVE_DEVICE" or "NO_ACTIVE_DEVICE" in (self.message or "")
