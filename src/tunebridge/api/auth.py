# Auth router — Spotify OAuth onboarding pages.
# Created: 2026-10-18
#
# Run once per operator: /auth/login -> Spotify consent -> /auth/callback shows
# the refresh token to copy into SPOTIFY_REFRESH_TOKEN.

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from tunebridge.api.deps import get_auth_flow, get_settings, get_token_manager
from tunebridge.api.pages import render
from tunebridge.auth.flow import AuthorizationFlow
from tunebridge.auth.tokens import TokenManager
from tunebridge.config import Settings, mask_secret
from tunebridge.errors import (
    AuthorizationDenied,
    InvalidState,
    MissingAuthorizationCode,
    TuneBridgeError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

_SETUP_HINTS = [
    "Client ID and Client Secret are set in .env",
    "The redirect URI registered in the Spotify dashboard matches exactly",
    "Your Spotify account is allowed to use the app (development mode user list)",
]


@router.get("/login", response_class=HTMLResponse)
async def login(request: Request, flow: AuthorizationFlow = Depends(get_auth_flow)):
    """Show the authorization URL for manual navigation."""
    auth = flow.initiate()
    return render(
        request,
        "login.html",
        auth_url=auth.url,
        state=auth.state,
        client_id=flow.credentials.client_id,
        redirect_uri=flow.credentials.redirect_uri,
        scopes=flow.scopes,
    )


@router.get("/login-auto")
async def login_auto(flow: AuthorizationFlow = Depends(get_auth_flow)):
    """Redirect straight to the Spotify consent screen."""
    auth = flow.initiate()
    return RedirectResponse(auth.url, status_code=302)


@router.get("/callback", response_class=HTMLResponse)
async def callback(request: Request, flow: AuthorizationFlow = Depends(get_auth_flow)):
    """OAuth callback route — exchanges the auth code for tokens."""
    params = dict(request.query_params)
    logger.info("Callback received with params: %s", sorted(params))

    try:
        tokens = await flow.complete_callback(params)
    except AuthorizationDenied as e:
        return render(
            request,
            "error.html",
            status_code=e.status_code,
            title="Authentication Error",
            message="Spotify did not grant access.",
            error=e.error,
            description=e.description or "No description provided",
        )
    except MissingAuthorizationCode as e:
        return render(
            request,
            "error.html",
            status_code=e.status_code,
            title="Missing Authorization Code",
            message=e.message,
            params=e.params,
        )
    except InvalidState as e:
        return render(
            request,
            "error.html",
            status_code=e.status_code,
            title="Invalid Authorization State",
            message=e.message,
        )
    except TuneBridgeError as e:
        return render(
            request,
            "error.html",
            status_code=e.status_code,
            title="Token Exchange Failed",
            message=e.message,
            detail=e.detail,
            hints=_SETUP_HINTS + [f"Redirect URI: {flow.credentials.redirect_uri}"],
        )

    return render(
        request,
        "callback_success.html",
        refresh_token=tokens.refresh_token,
        access_token=tokens.access_token,
        expires_in=tokens.expires_in,
    )


@router.get("/refresh_token", response_class=HTMLResponse)
async def refresh_token(
    request: Request,
    refresh_token: str = "",
    tokens: TokenManager = Depends(get_token_manager),
):
    """Exchange the given refresh token for a new access token."""
    if not refresh_token:
        return render(
            request,
            "error.html",
            status_code=400,
            title="Missing Refresh Token",
            message="Missing refresh_token parameter.",
        )

    try:
        token = await tokens.refresh(refresh_token)
    except TuneBridgeError as e:
        return render(
            request,
            "error.html",
            status_code=e.status_code,
            title="Token Refresh Failed",
            message=e.message,
            detail=e.detail,
        )

    return render(
        request,
        "refresh.html",
        refresh_token_hint=mask_secret(refresh_token),
        access_token=token.value,
        expires_in=token.expires_in,
        rotated_refresh_token=(
            token.refresh_token if token.refresh_token != refresh_token else None
        ),
    )


@router.get("/test", response_class=HTMLResponse)
async def diagnostics(request: Request, settings: Settings = Depends(get_settings)):
    """Diagnostic page: is the server reachable and configured?"""
    checks = [
        ("SPOTIFY_CLIENT_ID", bool(settings.spotify_client_id)),
        ("SPOTIFY_CLIENT_SECRET", bool(settings.spotify_client_secret)),
        ("SPOTIFY_REFRESH_TOKEN", settings.has_refresh_token),
    ]
    return render(
        request,
        "test.html",
        current_url=str(request.url),
        redirect_uri=settings.redirect_uri,
        checks=checks,
        enforce_state=settings.enforce_state,
    )
