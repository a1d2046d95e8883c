"""
Postpad — Post Service (Profile & Post Flows)
===============================================

What:  Profile view and post create/edit/delete workflows for an authenticated
       identity.
How:   Composes UserStore and PostStore. Create and delete touch both stores;
       the two writes are flushed in order (post first, then the owner's
       reference list) and committed together at the end of the flow.
Who:   Called by the gated route handlers in routes/profile.py and routes/posts.py.

Checks per flow:
    create  → non-blank content, user exists
    edit    → post exists, session user owns it   (content is not checked)
    delete  → post exists                         (ownership is not checked)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from postpad.exceptions import NotFoundError, UnauthorizedError, ValidationError
from postpad.models.post import Post
from postpad.schemas.auth import SessionIdentity
from postpad.schemas.post import PostView, ProfileView, UserView
from postpad.services.errors import store_failures_as
from postpad.services.post_store import post_store
from postpad.services.user_store import user_store

logger = logging.getLogger(__name__)


class PostService:
    """Business logic for the profile page and post mutations."""

    async def get_profile(self, db: AsyncSession, identity: SessionIdentity) -> ProfileView:
        """
        Load the session user (by email) with their posts resolved in list order.

        Raises:
            NotFoundError: the user no longer exists (404)
            DatabaseError: store failure (500)
        """
        with store_failures_as("Internal server error", "profile"):
            user = await user_store.find_by_email(db, identity.email)
            if user is None:
                raise NotFoundError(resource="User", context={"email": identity.email})
            posts = await user_store.list_posts(db, user.id)

        return ProfileView(
            user=UserView.model_validate(user),
            posts=[PostView.model_validate(p) for p in posts],
        )

    async def create_post(
        self,
        db: AsyncSession,
        identity: SessionIdentity,
        content: str,
    ) -> Post:
        """
        Create a post owned by the session user and append it to their list.

        Raises:
            ValidationError: content empty or whitespace only (400)
            NotFoundError:   the session user no longer exists (404)
            DatabaseError:   "Failed to create post" (500)
        """
        if not content or not content.strip():
            raise ValidationError(message="Post content cannot be empty", field="content")

        with store_failures_as("Failed to create post", "create_post"):
            user = await user_store.find_by_id(db, identity.userid)
            if user is None:
                raise NotFoundError(resource="User", resource_id=identity.userid)

            post = await post_store.create(db, content=content, owner_id=user.id)
            await user_store.append_post(db, user.id, post.id)
            await db.commit()

        return post

    async def edit_post(
        self,
        db: AsyncSession,
        identity: SessionIdentity,
        post_id: str,
        content: str,
    ) -> Post:
        """
        Overwrite a post's content. Only its owner may do this.

        Raises:
            NotFoundError:     no such post (404)
            UnauthorizedError: the session user is not the owner (403)
            DatabaseError:     "Failed to update post" (500)
        """
        with store_failures_as("Failed to update post", "edit_post"):
            post = await post_store.find_by_id(db, post_id)
            if post is None:
                raise NotFoundError(resource="Post", resource_id=post_id)

            if str(post.owner_id) != identity.userid:
                raise UnauthorizedError(
                    context={"post_id": str(post.id), "userid": identity.userid}
                )

            post = await post_store.update_content(db, post.id, content)
            if post is None:
                raise NotFoundError(resource="Post", resource_id=post_id)
            await db.commit()

        return post

    async def delete_post(
        self,
        db: AsyncSession,
        identity: SessionIdentity,
        post_id: str,
    ) -> None:
        """
        Delete a post and remove it from its owner's list.

        The reference is removed from the owner's list, which is not
        necessarily the session user's.

        Raises:
            NotFoundError: no such post (404)
            DatabaseError: "Failed to delete post" (500)
        """
        with store_failures_as("Failed to delete post", "delete_post"):
            post = await post_store.find_by_id(db, post_id)
            if post is None:
                raise NotFoundError(resource="Post", resource_id=post_id)

            pid, owner_id = post.id, post.owner_id
            if str(owner_id) != identity.userid:
                logger.warning(
                    "Post %s owned by %s deleted by %s",
                    pid, owner_id, identity.userid,
                )

            await post_store.delete(db, pid)
            await user_store.remove_post(db, owner_id, pid)
            await db.commit()


post_service = PostService()
