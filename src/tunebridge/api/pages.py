# HTML page rendering for the /auth onboarding routes.
# Created: 2026-10-18

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, name: str, status_code: int = 200, **context: Any) -> HTMLResponse:
    """Render a template from ``tunebridge/templates`` (autoescaped)."""
    return templates.TemplateResponse(request, name, context, status_code=status_code)
