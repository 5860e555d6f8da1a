# Request logging middleware.
# Created: 2026-10-18

from __future__ import annotations

import logging
import time

from fastapi import Request

logger = logging.getLogger("tunebridge.access")


async def log_requests(request: Request, call_next):
    """Log ``METHOD path status duration`` for every request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
