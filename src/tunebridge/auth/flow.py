# Authorization Flow — Spotify OAuth 2.0 authorization code flow.
# Created: 2026-10-18
#
# initiate() -> user consents at Spotify -> complete_callback(query params).
# Each attempt moves AWAITING_USER_CONSENT -> AWAITING_CALLBACK -> COMPLETED.
# The resulting refresh token is handed back to the operator, never stored.

from __future__ import annotations

import logging
from collections.abc import Mapping

from tunebridge.auth.models import (
    AuthorizationAttempt,
    AuthorizationRequest,
    FlowStatus,
    TokenPair,
)
from tunebridge.auth.state_store import StateStore
from tunebridge.config import SPOTIFY_SCOPES, Credentials
from tunebridge.errors import (
    AuthorizationDenied,
    InvalidState,
    MissingAuthorizationCode,
    SpotifyAPIError,
    TokenExchangeFailure,
)
from tunebridge.integrations.oauth import build_auth_url, generate_state
from tunebridge.integrations.protocol import SpotifyAPIProtocol

logger = logging.getLogger(__name__)


class AuthorizationFlow:
    """Builds authorization URLs and completes callbacks.

    When ``enforce_state`` is on, a callback is only accepted if its ``state``
    was issued by :meth:`initiate`, has not expired and has not been used.
    """

    def __init__(
        self,
        credentials: Credentials,
        api: SpotifyAPIProtocol,
        scopes: list[str] | None = None,
        store: StateStore | None = None,
        enforce_state: bool = True,
    ):
        self.credentials = credentials
        self.scopes = list(scopes or SPOTIFY_SCOPES)
        self.store = store if store is not None else StateStore()
        self.enforce_state = enforce_state
        self._api = api

    def initiate(self) -> AuthorizationRequest:
        """Start a login attempt and return the URL the user must visit."""
        attempt = AuthorizationAttempt(state=generate_state())
        url = build_auth_url(
            client_id=self.credentials.client_id,
            redirect_uri=self.credentials.redirect_uri,
            scopes=self.scopes,
            state=attempt.state,
        )
        attempt.status = FlowStatus.AWAITING_CALLBACK
        self.store.add(attempt)
        logger.info("Generated authorization URL (redirect_uri=%s)", self.credentials.redirect_uri)
        return AuthorizationRequest(url=url, state=attempt.state)

    async def complete_callback(self, params: Mapping[str, str]) -> TokenPair:
        """Handle the redirect back from Spotify.

        Args:
            params: Callback query parameters (``code``, ``state``, ``error``,
                ``error_description``).

        Returns:
            The access/refresh token pair.

        Raises:
            AuthorizationDenied: Spotify returned an ``error``.
            MissingAuthorizationCode: No ``code`` in the callback.
            InvalidState: State enforcement is on and the state doesn't match.
            TokenExchangeFailure: The code could not be exchanged.
        """
        error = params.get("error")
        code = params.get("code")
        state = params.get("state") or ""

        if error:
            logger.warning("Spotify OAuth error: %s", error)
            if state:
                self.store.consume(state)
            raise AuthorizationDenied(error, params.get("error_description") or None)

        if not code:
            logger.warning("No authorization code received")
            raise MissingAuthorizationCode(params)

        attempt = self.store.consume(state) if state else None
        if attempt is None and self.enforce_state:
            logger.warning("Rejected callback with unknown or expired state")
            raise InvalidState(state or None)

        try:
            tokens = await self._api.exchange_code(code)
        except SpotifyAPIError as e:
            logger.error("Error exchanging code for tokens: %s", e)
            raise TokenExchangeFailure("Token exchange failed", detail=str(e)) from e

        if attempt is not None:
            attempt.status = FlowStatus.COMPLETED
        logger.info("Authorization completed; refresh token must be saved by the operator")
        return tokens
