"""FastAPI application factory and server runner.

``create_app()`` wires the Spotify client, token manager, authorization flow
and playback facade from one immutable ``Settings`` object and mounts the
``/auth`` and ``/spotify`` routers. Missing client credentials fail here, at
startup, rather than per request.
"""

from __future__ import annotations

import logging
import urllib.parse

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from tunebridge import __version__
from tunebridge.api import auth, spotify
from tunebridge.api.middleware import log_requests
from tunebridge.auth.flow import AuthorizationFlow
from tunebridge.auth.state_store import StateStore
from tunebridge.auth.tokens import TokenManager
from tunebridge.config import Settings, get_settings
from tunebridge.errors import TuneBridgeError
from tunebridge.integrations.protocol import SpotifyAPIProtocol
from tunebridge.integrations.spotify import SpotifyClient
from tunebridge.playback import PlaybackFacade

logger = logging.getLogger(__name__)

_ROUTERS = [auth.router, spotify.router]


async def _handle_bridge_error(_request: Request, exc: TuneBridgeError) -> JSONResponse:
    logger.error("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _handle_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request: %s", exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


async def _handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Settings | None = None,
    spotify_api: SpotifyAPIProtocol | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration; defaults to the environment.
        spotify_api: Spotify implementation; defaults to the httpx client.

    Raises:
        ConfigurationError: Client ID or secret is missing.
    """
    settings = settings or get_settings()
    credentials = settings.credentials()

    api = spotify_api or SpotifyClient(credentials)
    token_manager = TokenManager(api, settings.spotify_refresh_token)
    auth_flow = AuthorizationFlow(
        credentials,
        api,
        scopes=settings.scopes,
        store=StateStore(ttl=settings.state_ttl),
        enforce_state=settings.enforce_state,
    )

    if not token_manager.configured:
        logger.warning(
            "SPOTIFY_REFRESH_TOKEN is not set; /spotify endpoints will fail until "
            "you complete the login at /auth/login"
        )

    app = FastAPI(
        title="tunebridge",
        description="Spotify OAuth onboarding and playback bridge.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.token_manager = token_manager
    app.state.auth_flow = auth_flow
    app.state.playback = PlaybackFacade(token_manager, api)

    # --- CORS -----------------------------------------------------------
    origins = settings.cors_allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(TuneBridgeError, _handle_bridge_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected)

    for router in _ROUTERS:
        app.include_router(router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Spotify API is running!"

    return app


def run_server(host: str | None = None, port: int | None = None, dev: bool = False) -> None:
    """Start the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    logger.info("Server is running on http://%s:%d", host, port)
    if urllib.parse.urlsplit(settings.redirect_uri).port != port:
        logger.warning(
            "Redirect URI %s does not use port %d; Spotify callbacks will not reach this server",
            settings.redirect_uri,
            port,
        )

    if dev:
        uvicorn.run(
            "tunebridge.api.server:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            log_level="debug",
        )
    else:
        app = create_app(settings)
        uvicorn.run(app, host=host, port=port)
