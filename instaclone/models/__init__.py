"""
Models package initialization
"""

from .follow import UserFollow
from .user import User
from .post_comment import PostComment
from .post_like import PostLike
from .post import Post

__all__ = ["User", "UserFollow", "Post", "PostComment", "PostLike"]
