"""
Postpad — Profile Route
=========================

What:  GET /profile (gated): the session user's details and posts.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from postpad.auth.gate import require_identity
from postpad.database import get_db_session
from postpad.schemas.auth import SessionIdentity
from postpad.services.post_service import post_service
from postpad.templating import render

router = APIRouter(tags=["Profile"])


@router.get("/profile", response_class=HTMLResponse)
async def profile(
    request: Request,
    identity: SessionIdentity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
):
    view = await post_service.get_profile(db, identity)
    return render(request, "profile.html", {"user": view.user, "posts": view.posts})
