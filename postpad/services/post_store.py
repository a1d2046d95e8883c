"""
Postpad — Post Store
======================

What:  Persistence of post records (content + owning user).
How:   Stateless methods taking the request's AsyncSession; writes are flushed
       and committed by the calling flow.
Who:   PostService.
"""

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from postpad.exceptions import DatabaseError
from postpad.models.post import Post
from postpad.services.user_store import IdLike, coerce_id

logger = logging.getLogger(__name__)


class PostStore:
    """Post store operations."""

    async def create(self, db: AsyncSession, content: str, owner_id: IdLike) -> Post:
        post = Post(content=content, owner_id=coerce_id(owner_id))
        try:
            db.add(post)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e))
            raise DatabaseError(context={"operation": "create_post"})
        logger.info("Post created: %s (owner=%s)", post.id, post.owner_id)
        return post

    async def find_by_id(self, db: AsyncSession, post_id: IdLike) -> Optional[Post]:
        pid = coerce_id(post_id)
        if pid is None:
            return None
        try:
            result = await db.execute(select(Post).where(Post.id == pid))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", pid, str(e))
            raise DatabaseError(context={"operation": "find_post", "post_id": str(pid)})

    async def update_content(self, db: AsyncSession, post_id: IdLike, content: str) -> Optional[Post]:
        post = await self.find_by_id(db, post_id)
        if post is None:
            return None
        try:
            post.content = content
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating post %s: %s", post.id, str(e))
            raise DatabaseError(context={"operation": "update_post", "post_id": str(post.id)})
        return post

    async def delete(self, db: AsyncSession, post_id: IdLike) -> bool:
        pid = coerce_id(post_id)
        if pid is None:
            return False
        try:
            result = await db.execute(delete(Post).where(Post.id == pid))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting post %s: %s", pid, str(e))
            raise DatabaseError(context={"operation": "delete_post", "post_id": str(pid)})
        return bool(result.rowcount)


post_store = PostStore()
