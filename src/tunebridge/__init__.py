"""tunebridge — a small backend between a client app and the Spotify Web API.

Handles the OAuth authorization-code onboarding, derives access tokens from a
configured refresh token, and forwards now-playing, top-tracks, play and pause
calls.

Created: 2026-10-18
"""

__version__ = "0.1.0"
