"""
Postpad — Registration & Login Routes
=======================================

What:  POST /register and POST /login.
How:   Read the body (urlencoded form or JSON object), delegate to AuthService,
       set the session cookie on the redirect. Errors surface as application
       exceptions and are turned into plain-text 400/500 responses by the
       global handlers.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from postpad.auth.gate import get_settings, get_token_issuer, set_session_cookie
from postpad.config import Settings
from postpad.database import get_db_session
from postpad.routes.body import read_payload
from postpad.schemas.auth import LoginForm, RegisterForm
from postpad.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/register")
async def register(
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    form = RegisterForm.from_payload(payload)
    _, token = await auth_service.register(
        db,
        form,
        hasher=request.app.state.password_hasher,
        issuer=get_token_issuer(request),
    )
    resp = RedirectResponse(url="/succes", status_code=302)
    set_session_cookie(resp, settings, token)
    return resp


@router.post("/login")
async def login(
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    form = LoginForm.from_payload(payload)
    _, token = await auth_service.login(
        db,
        form,
        hasher=request.app.state.password_hasher,
        issuer=get_token_issuer(request),
    )
    resp = RedirectResponse(url="/profile", status_code=302)
    set_session_cookie(resp, settings, token)
    return resp
