"""
Postpad — Credential Store
============================

What:  Persistence of user records and each user's ordered post-reference list.
How:   Stateless methods taking the request's AsyncSession. Writes are flushed,
       never committed: the calling flow commits once all of its writes
       succeeded, so a post and its reference land in the same transaction.
Who:   AuthService (registration/login) and PostService (profile, posts).

Error Handling:
    Unexpected SQLAlchemy errors are wrapped in DatabaseError (generic 500).
    A duplicate email raises DuplicateEmailError, both from the pre-insert
    lookup and from the unique index when two registrations race.
"""

import logging
import uuid
from typing import List, Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from postpad.exceptions import DatabaseError, DuplicateEmailError
from postpad.models.post import Post
from postpad.models.user import User, UserPostRef

logger = logging.getLogger(__name__)

IdLike = Union[str, uuid.UUID]


def coerce_id(value: IdLike) -> Optional[uuid.UUID]:
    """Parse a path/claim id into a UUID; None when it is not one."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class UserStore:
    """Credential store operations."""

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(context={"operation": "find_by_email"})

    async def find_by_id(self, db: AsyncSession, user_id: IdLike) -> Optional[User]:
        uid = coerce_id(user_id)
        if uid is None:
            return None
        try:
            result = await db.execute(select(User).where(User.id == uid))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user %s: %s", uid, str(e))
            raise DatabaseError(context={"operation": "find_by_id", "user_id": str(uid)})

    async def create(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        password_hash: str,
        age: Optional[int] = None,
    ) -> User:
        """
        Insert a new user.

        The email check runs before the insert; it is not atomic, so the
        unique index is the final word when two registrations race.
        """
        if await self.find_by_email(db, email) is not None:
            raise DuplicateEmailError(email)

        user = User(username=username, email=email, password=password_hash, age=age)
        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise DuplicateEmailError(email)
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e))
            raise DatabaseError(context={"operation": "create_user"})

        logger.info("User created: %s", user.id)
        return user

    async def append_post(self, db: AsyncSession, user_id: IdLike, post_id: IdLike) -> None:
        """Append one reference to the end of the user's post list."""
        try:
            db.add(UserPostRef(user_id=coerce_id(user_id), post_id=coerce_id(post_id)))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error appending post %s to user %s: %s", post_id, user_id, str(e))
            raise DatabaseError(context={"operation": "append_post"})

    async def remove_post(self, db: AsyncSession, user_id: IdLike, post_id: IdLike) -> int:
        """Remove every reference to `post_id` from the user's list. Returns the count removed."""
        uid, pid = coerce_id(user_id), coerce_id(post_id)
        if uid is None or pid is None:
            return 0
        try:
            result = await db.execute(
                delete(UserPostRef).where(
                    UserPostRef.user_id == uid,
                    UserPostRef.post_id == pid,
                )
            )
            await db.flush()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            logger.error("Database error removing post %s from user %s: %s", pid, uid, str(e))
            raise DatabaseError(context={"operation": "remove_post"})

    async def list_post_ids(self, db: AsyncSession, user_id: IdLike) -> List[uuid.UUID]:
        """The raw reference list, in order (including dangling references)."""
        uid = coerce_id(user_id)
        if uid is None:
            return []
        try:
            result = await db.execute(
                select(UserPostRef.post_id)
                .where(UserPostRef.user_id == uid)
                .order_by(UserPostRef.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing post refs for %s: %s", uid, str(e))
            raise DatabaseError(context={"operation": "list_post_ids"})

    async def list_posts(self, db: AsyncSession, user_id: IdLike) -> List[Post]:
        """
        Resolve the user's post list into Post rows, in list order.

        References whose post no longer exists are skipped.
        """
        uid = coerce_id(user_id)
        if uid is None:
            return []
        try:
            result = await db.execute(
                select(Post)
                .join(UserPostRef, UserPostRef.post_id == Post.id)
                .where(UserPostRef.user_id == uid)
                .order_by(UserPostRef.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error resolving posts for %s: %s", uid, str(e))
            raise DatabaseError(context={"operation": "list_posts"})


user_store = UserStore()
