# Request/response schemas for the HTTP API.
# Created: 2026-10-18
