"""
Postpad — Post Routes
=======================

What:  POST /dash (create), POST /edit/{post_id}, POST /delete/{post_id}.
How:   All three are gated by `require_identity`; each delegates to
       PostService and redirects back to /profile on success. Create and
       edit read `content` from a urlencoded form or a JSON object.

Status codes (via global handlers):
    /dash          400 empty content, 404 user vanished, 500 store failure
    /edit/{id}     404 no such post, 403 not the owner, 500 store failure
    /delete/{id}   404 no such post, 500 store failure
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from postpad.auth.gate import require_identity
from postpad.database import get_db_session
from postpad.routes.body import read_payload
from postpad.schemas.auth import SessionIdentity
from postpad.schemas.post import PostForm
from postpad.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])


def _back_to_profile() -> RedirectResponse:
    return RedirectResponse(url="/profile", status_code=302)


@router.post("/dash")
async def create_post(
    identity: SessionIdentity = Depends(require_identity),
    payload: Dict[str, Any] = Depends(read_payload),
    db: AsyncSession = Depends(get_db_session),
):
    form = PostForm.from_payload(payload)
    await post_service.create_post(db, identity, form.content)
    return _back_to_profile()


@router.post("/edit/{post_id}")
async def edit_post(
    post_id: str,
    identity: SessionIdentity = Depends(require_identity),
    payload: Dict[str, Any] = Depends(read_payload),
    db: AsyncSession = Depends(get_db_session),
):
    form = PostForm.from_payload(payload)
    await post_service.edit_post(db, identity, post_id, form.content)
    return _back_to_profile()


@router.post("/delete/{post_id}")
async def delete_post(
    post_id: str,
    identity: SessionIdentity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
):
    await post_service.delete_post(db, identity, post_id)
    return _back_to_profile()
