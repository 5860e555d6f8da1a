# Token and authorization-attempt data models.
# Created: 2026-10-18

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class TokenPair:
    """Tokens returned by the authorization code exchange.

    The refresh token is long-lived and must be stored by the operator;
    nothing in this process persists it.
    """

    access_token: str
    refresh_token: str
    expires_in: int = 3600
    scope: str = ""
    token_type: str = "Bearer"


@dataclass(frozen=True)
class AccessToken:
    """Short-lived bearer token derived from the refresh token for one request."""

    value: str
    expires_in: int = 3600
    # Spotify may rotate the refresh token on refresh
    refresh_token: str | None = None

    def __str__(self) -> str:
        return self.value


class FlowStatus(str, Enum):
    """Lifecycle of a single authorization attempt."""

    AWAITING_USER_CONSENT = "awaiting_user_consent"
    AWAITING_CALLBACK = "awaiting_callback"
    COMPLETED = "completed"


@dataclass
class AuthorizationAttempt:
    """One login round trip, keyed by its state value."""

    state: str
    status: FlowStatus = FlowStatus.AWAITING_USER_CONSENT
    created_at: float = field(default_factory=time.monotonic)

    def expired(self, ttl: float) -> bool:
        return (time.monotonic() - self.created_at) > ttl


@dataclass(frozen=True)
class AuthorizationRequest:
    """What ``AuthorizationFlow.initiate()`` hands back to the caller."""

    url: str
    state: str
