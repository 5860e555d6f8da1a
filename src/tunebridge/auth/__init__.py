# Spotify authorization: the OAuth code flow and refresh-token exchange.
# Created: 2026-10-18
