from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import RedirectResponse, Response

from postpad.auth.tokens import TokenIssuer
from postpad.config import Settings
from postpad.exceptions import AuthExpiredOrInvalid, InvalidOrExpiredToken
from postpad.schemas.auth import SessionIdentity

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def require_identity(request: Request) -> SessionIdentity:
    """
    Session gate for protected routes.

    No cookie: redirect to login. Cookie that fails verification: clear it
    and redirect. Otherwise return the identity encoded in the token.
    """
    settings = get_settings(request)
    token = request.cookies.get(settings.cookie_name, "")
    if not token:
        raise AuthExpiredOrInvalid(clear_cookie=False)
    try:
        claims = get_token_issuer(request).verify(token)
        return SessionIdentity.from_claims(claims)
    except (InvalidOrExpiredToken, KeyError) as e:
        logger.info("Rejected session on %s: %s", request.url.path, type(e).__name__)
        raise AuthExpiredOrInvalid(clear_cookie=True)


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "lax", "secure": settings.cookie_secure}


def set_session_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        settings.cookie_name,
        token,
        max_age=settings.session_ttl_seconds,
        **cookie_settings(settings),
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.cookie_name, **cookie_settings(settings))


def redirect_to_login(settings: Settings, clear_cookie: bool = True) -> RedirectResponse:
    resp = RedirectResponse(url=LOGIN_PATH, status_code=302)
    if clear_cookie:
        clear_session_cookie(resp, settings)
    return resp
