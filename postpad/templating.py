"""Jinja2 template renderer shared by the page routes."""

from pathlib import Path
from typing import Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def render(request: Request, template_name: str, ctx: Optional[dict] = None):
    """TemplateResponse wrapper; every template gets the request."""
    return templates.TemplateResponse(request, template_name, ctx or {})
