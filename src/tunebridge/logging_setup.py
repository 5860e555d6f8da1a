# Logging setup — Rich console output for the server and CLI.
# Created: 2026-10-18

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_QUIET_LOGGERS = ("httpx", "httpcore")

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger. Later calls only adjust the level."""
    global _configured

    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    root = logging.getLogger()
    if not _configured:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root.addHandler(handler)
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
        _configured = True

    root.setLevel(numeric)
