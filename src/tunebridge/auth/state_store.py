# In-memory store for pending authorization attempts (state -> attempt).
# Created: 2026-10-18
#
# Used between /auth/login and /auth/callback. Entries are single-use and
# expire after a TTL. The number pending at once is capped, oldest evicted first.

from __future__ import annotations

import logging

from tunebridge.auth.models import AuthorizationAttempt, FlowStatus

logger = logging.getLogger(__name__)

DEFAULT_STATE_TTL = 600.0
MAX_PENDING_STATES = 500


class StateStore:
    def __init__(self, ttl: float = DEFAULT_STATE_TTL, max_pending: int = MAX_PENDING_STATES):
        self.ttl = ttl
        self.max_pending = max_pending
        self._pending: dict[str, AuthorizationAttempt] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, attempt: AuthorizationAttempt) -> None:
        self._clean_expired()
        # evict oldest
        while self._pending and len(self._pending) >= self.max_pending:
            oldest = next(iter(self._pending))
            del self._pending[oldest]
            logger.warning("Too many pending authorization attempts; dropped the oldest")
        self._pending[attempt.state] = attempt

    def get(self, state: str) -> AuthorizationAttempt | None:
        """Peek at a pending attempt without consuming it."""
        attempt = self._pending.get(state)
        if attempt is None or attempt.expired(self.ttl):
            return None
        return attempt

    def consume(self, state: str) -> AuthorizationAttempt | None:
        """Remove and return the attempt for *state* if it is still awaiting its callback."""
        attempt = self._pending.pop(state, None)
        if attempt is None:
            return None
        if attempt.expired(self.ttl):
            logger.info("Authorization state expired")
            return None
        if attempt.status is not FlowStatus.AWAITING_CALLBACK:
            return None
        return attempt

    def _clean_expired(self) -> None:
        expired = [s for s, a in self._pending.items() if a.expired(self.ttl)]
        for s in expired:
            del self._pending[s]
