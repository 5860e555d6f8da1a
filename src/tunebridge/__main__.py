"""tunebridge entry point.

Usage::

    tunebridge                      Start the server (HOST/PORT from env, default 127.0.0.1:3000)
    tunebridge --port 3000 --dev    Start with auto-reload
    tunebridge --check-config       Report which settings are present and exit
"""

import argparse
import logging
import sys

from tunebridge import __version__
from tunebridge.config import Settings, get_settings, mask_secret
from tunebridge.errors import ConfigurationError
from tunebridge.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def check_config(settings: Settings) -> int:
    """Print a configuration report. Returns the process exit code."""
    rows = [
        ("SPOTIFY_CLIENT_ID", settings.spotify_client_id or "(not set)"),
        ("SPOTIFY_CLIENT_SECRET", mask_secret(settings.spotify_client_secret)),
        ("SPOTIFY_REFRESH_TOKEN", mask_secret(settings.spotify_refresh_token)),
        ("Redirect URI", settings.redirect_uri),
        ("Listen on", f"{settings.host}:{settings.port}"),
        ("State validation", "on" if settings.enforce_state else "off"),
    ]
    width = max(len(name) for name, _ in rows)
    for name, value in rows:
        print(f"  {name.ljust(width)}  {value}")

    try:
        settings.credentials()
    except ConfigurationError as e:
        print(f"\n{e.message}", file=sys.stderr)
        return 1
    if not settings.has_refresh_token:
        print("\nNo refresh token yet: start the server and open /auth/login.")
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="tunebridge",
        description="Spotify OAuth onboarding and playback bridge",
    )
    parser.add_argument("--host", help="Interface to bind (default: $HOST or 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, help="Port to listen on (default: $PORT or 3000)")
    parser.add_argument("--dev", action="store_true", help="Auto-reload on code changes")
    parser.add_argument("--log-level", help="Logging level (default: $TUNEBRIDGE_LOG_LEVEL or INFO)")
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Print which settings are configured and exit",
    )
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args()

    try:
        settings = get_settings()
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        sys.exit(1)
    setup_logging(level=args.log_level or settings.log_level)

    if args.check_config:
        sys.exit(check_config(settings))

    try:
        settings.credentials()
    except ConfigurationError as e:
        logger.error("%s", e.message)
        sys.exit(1)

    from tunebridge.api.server import run_server

    try:
        run_server(host=args.host, port=args.port, dev=args.dev)
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
