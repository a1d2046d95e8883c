"""
Postpad — Post SQLAlchemy Model
=================================

What:  ORM model for the `posts` table.
Who:   Used by PostStore for CRUD and by Alembic for schema management.

Invariant:
    owner_id always references an existing user (foreign key). Only the owner
    may change `content`; see PostService for the edit/delete checks.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from postpad.database import Base


class Post(Base):
    """
    A short text post.

    Lifecycle:
        1. Created via POST /dash and appended to the owner's post list
        2. Content overwritten via POST /edit/{id}
        3. Deleted via POST /delete/{id} and removed from the owner's list
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, owner_id={self.owner_id})>"
