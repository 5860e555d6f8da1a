# Common API response schemas.
# Created: 2026-10-18

from __future__ import annotations

from pydantic import BaseModel


class APIResponse(BaseModel):
    """Base response wrapper."""

    model_config = {"from_attributes": True}


class ErrorResponse(APIResponse):
    """Error envelope used by every JSON endpoint."""

    error: str


class StatusResponse(APIResponse):
    """Status string response."""

    status: str
