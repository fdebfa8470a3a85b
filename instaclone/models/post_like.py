from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from .post import Post


class PostLike(SQLModel, table=True):
    """Membership of a user in a post's like set; the key allows one like per (user, post)"""
    user_id: str = Field(foreign_key="user.id", primary_key=True)
    post_id: str = Field(foreign_key="post.id", primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True)
    )

    post: Optional["Post"] = Relationship(back_populates="likes")
