# Shared FastAPI dependencies for the API layer.
# Created: 2026-10-18
#
# create_app() stores the collaborators on app.state; routes resolve them here
# so tests can build an app around fakes.

from __future__ import annotations

from fastapi import Request

from tunebridge.auth.flow import AuthorizationFlow
from tunebridge.auth.tokens import TokenManager
from tunebridge.config import Settings
from tunebridge.playback import PlaybackFacade


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager


def get_auth_flow(request: Request) -> AuthorizationFlow:
    return request.app.state.auth_flow


def get_playback(request: Request) -> PlaybackFacade:
    return request.app.state.playback
