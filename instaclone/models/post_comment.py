import uuid
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class PostComment(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    text: str = Field(..., max_length=1000)
    post_id: str = Field(foreign_key="post.id", index=True)
    user_id: str = Field(foreign_key="user.id")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True)
    )

    post: Optional["Post"] = Relationship(back_populates="comments")
    user: Optional["User"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
