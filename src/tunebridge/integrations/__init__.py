# Spotify accounts + Web API clients.
# Created: 2026-10-18
