# Settings — environment-driven configuration for the Spotify bridge.
# Created: 2026-10-18
#
# Values come from the process environment; a local .env file is loaded first
# so operators can paste the refresh token there after onboarding.

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from tunebridge.errors import ConfigurationError

# Must match the redirect URI registered in the Spotify developer dashboard exactly.
DEFAULT_REDIRECT_URI = "http://127.0.0.1:3000/auth/callback"

SPOTIFY_SCOPES: list[str] = [
    "user-read-playback-state",
    "user-modify-playback-state",
    "user-read-currently-playing",
    "user-top-read",
]

# env var -> Settings field
_ENV_FIELDS: dict[str, str] = {
    "SPOTIFY_CLIENT_ID": "spotify_client_id",
    "SPOTIFY_CLIENT_SECRET": "spotify_client_secret",
    "SPOTIFY_REFRESH_TOKEN": "spotify_refresh_token",
    "SPOTIFY_REDIRECT_URI": "redirect_uri",
    "HOST": "host",
    "PORT": "port",
    "TUNEBRIDGE_ENFORCE_STATE": "enforce_state",
    "TUNEBRIDGE_STATE_TTL": "state_ttl",
    "TUNEBRIDGE_CORS_ORIGINS": "cors_allowed_origins",
    "TUNEBRIDGE_LOG_LEVEL": "log_level",
}


@dataclass(frozen=True)
class Credentials:
    """Spotify application credentials, fixed for the life of the process."""

    client_id: str
    client_secret: str
    redirect_uri: str


class Settings(BaseModel):
    """Process-wide settings. Treat as read-only once loaded."""

    model_config = {"frozen": True}

    spotify_client_id: str | None = None
    spotify_client_secret: str | None = None
    spotify_refresh_token: str | None = None
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scopes: list[str] = Field(default_factory=lambda: list(SPOTIFY_SCOPES))

    host: str = "127.0.0.1"
    port: int = 3000

    enforce_state: bool = True
    state_ttl: float = 600.0

    cors_allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def load(cls, env_file: str | None = None) -> Settings:
        """Build settings from the environment (and ``.env`` if present).

        Raises:
            ConfigurationError: A variable holds a value of the wrong type.
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))

        values: dict[str, object] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            raw = os.getenv(env_name)
            if raw is None or raw.strip() == "":
                continue
            if field_name == "cors_allowed_origins":
                values[field_name] = [o.strip() for o in raw.split(",") if o.strip()]
            else:
                values[field_name] = raw.strip()

        try:
            return cls(**values)
        except ValidationError as e:
            env_names = {field: env for env, field in _ENV_FIELDS.items()}
            fields = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
            bad = sorted(env_names.get(f, f) for f in fields)
            raise ConfigurationError(
                f"Invalid configuration value for {', '.join(bad)}. "
                "Check the environment or .env."
            ) from e

    def credentials(self) -> Credentials:
        """Return the client credentials, or raise if any are missing."""
        missing = []
        if not self.spotify_client_id:
            missing.append("SPOTIFY_CLIENT_ID")
        if not self.spotify_client_secret:
            missing.append("SPOTIFY_CLIENT_SECRET")
        if missing:
            raise ConfigurationError(
                f"Missing Spotify credentials: {', '.join(missing)}. "
                "Set them in the environment or in .env."
            )
        return Credentials(
            client_id=self.spotify_client_id,
            client_secret=self.spotify_client_secret,
            redirect_uri=self.redirect_uri,
        )

    @property
    def has_refresh_token(self) -> bool:
        return bool(self.spotify_refresh_token)


@lru_cache
def get_settings() -> Settings:
    """Cached settings for the running process."""
    return Settings.load()


def mask_secret(value: str | None) -> str:
    """Show only the tail of a secret, for logs and diagnostic pages."""
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "****"
    return f"****{value[-4:]}"
