from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime
from sqlmodel import SQLModel, Field


class UserFollow(SQLModel, table=True):
    """Join table for user following many-to-many relationship.

    A single row is both sides of the edge: it appears in the follower's
    ``following`` and in the followed user's ``followers``.
    """
    __table_args__ = (
        CheckConstraint("follower_id != followed_id", name="ck_userfollow_no_self_follow"),
    )

    follower_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster follower queries
    )
    followed_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True  # For faster followed queries
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True)
    )
