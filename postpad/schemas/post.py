"""
Postpad — Post and Profile View Schemas
=========================================

What:  The post form body, and the pydantic models passed to the Jinja2 templates.
How:   Views are built from ORM objects with `model_validate(obj)` (from_attributes), so
       templates never touch live SQLAlchemy instances.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from postpad.schemas.forms import FormModel


class PostForm(FormModel):
    """Body of POST /dash and POST /edit/{id}."""
    content: str = Field(default="")


class PostView(BaseModel):
    """One post as shown on the profile page."""
    id: uuid.UUID
    content: str
    owner_id: uuid.UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserView(BaseModel):
    """Public fields of a user (the password hash is never exposed)."""
    id: uuid.UUID
    username: str
    email: str
    age: Optional[int] = None

    model_config = {"from_attributes": True}


class ProfileView(BaseModel):
    """Context for profile.html: the user plus their resolved post list."""
    user: UserView
    posts: List[PostView] = Field(default_factory=list)
