"""
Postpad — User SQLAlchemy Models
==================================

What:  ORM models for the `users` table and each user's ordered list of post
       references (`user_posts`).
Who:   Used by UserStore for CRUD and by Alembic for schema management.

Table Design:
    users
        - id: UUID primary key, generated in Python (portable across PostgreSQL/SQLite)
        - email: unique index; the credential store also pre-checks it
        - password: bcrypt hash, never the plain password
        - age: optional integer
    user_posts
        - id: autoincrement; defines the order of the user's post list
        - user_id: owning user
        - post_id: referenced post. No foreign key: the list is maintained by
          separate writes from the posts table, and a reference to a deleted
          post is skipped when the list is resolved.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from postpad.database import Base


class User(Base):
    """
    A registered account.

    Lifecycle:
        Created on registration. Its post list (user_posts rows) changes on
        post create/delete. Never otherwise updated in place; never deleted.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
    )

    # bcrypt output, e.g. "$2b$10$..."
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


class UserPostRef(Base):
    """One entry in a user's ordered post list."""

    __tablename__ = "user_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    post_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    __table_args__ = (
        Index("idx_user_posts_user_id", "user_id", "id"),
    )

    def __repr__(self) -> str:
        return f"<UserPostRef(user_id={self.user_id}, post_id={self.post_id})>"
