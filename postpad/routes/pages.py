"""
Postpad — Page Routes
=======================

What:  Login/register form pages, the post-registration welcome page and logout.
How:   Render Jinja2 templates; /succes verifies the cookie itself and sends
       the user back to login (clearing the cookie) when it does not verify.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from postpad.auth.gate import clear_session_cookie, get_settings, get_token_issuer, redirect_to_login
from postpad.config import Settings
from postpad.exceptions import InvalidOrExpiredToken
from postpad.schemas.auth import SessionIdentity
from postpad.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse)
@router.get("/login", response_class=HTMLResponse)
@router.get("/register", response_class=HTMLResponse)
async def login_page(request: Request):
    """Login and registration forms share one page."""
    return render(request, "login.html")


@router.get("/succes", response_class=HTMLResponse)
async def success_page(request: Request, settings: Settings = Depends(get_settings)):
    token = request.cookies.get(settings.cookie_name, "")
    try:
        claims = get_token_issuer(request).verify(token)
        user = SessionIdentity.from_claims(claims)
    except (InvalidOrExpiredToken, KeyError):
        return redirect_to_login(settings, clear_cookie=True)
    return render(request, "succes.html", {"user": user})


@router.get("/logout")
async def logout(settings: Settings = Depends(get_settings)):
    resp = RedirectResponse(url="/login", status_code=302)
    clear_session_cookie(resp, settings)
    return resp
