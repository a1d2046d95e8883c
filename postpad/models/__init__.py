# Models package init: importing it registers every table on Base.metadata
from postpad.models.post import Post
from postpad.models.user import User, UserPostRef

__all__ = ["Post", "User", "UserPostRef"]
