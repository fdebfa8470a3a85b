"""
Post model: an image with a caption, its like set and its comment thread.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship

from instaclone.models.post_comment import PostComment
from instaclone.models.post_like import PostLike

if TYPE_CHECKING:
    from instaclone.models.user import User


class Post(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    image_url: str = Field(..., max_length=2048)
    caption: str = Field(default="", max_length=2200)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        index=True
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)}
    )

    user: Optional["User"] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )

    comments: List[PostComment] = Relationship(
        back_populates="post",
        sa_relationship_kwargs={
            "lazy": "selectin",
            "cascade": "all, delete-orphan",
            "order_by": "PostComment.created_at",
        }
    )

    likes: List[PostLike] = Relationship(
        back_populates="post",
        sa_relationship_kwargs={
            "lazy": "selectin",
            "cascade": "all, delete-orphan",
        }
    )
