import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from passlib.context import CryptContext

from instaclone.models.follow import UserFollow

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def generate_uuid() -> str:
    return str(uuid.uuid4())


class User(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    username: str = Field(..., index=True, unique=True, max_length=30)
    email: str = Field(..., index=True, unique=True, max_length=255)
    hashed_password: str
    bio: str = Field(default="", max_length=500)
    profile_image_url: str = Field(default="")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": lambda: datetime.now(timezone.utc)}
    )

    following: List["User"] = Relationship(
        back_populates="followers",
        link_model=UserFollow,
        sa_relationship_kwargs={
            "primaryjoin": "User.id == UserFollow.follower_id",
            "secondaryjoin": "User.id == UserFollow.followed_id",
            "lazy": "selectin",
            "join_depth": 1
        }
    )

    followers: List["User"] = Relationship(
        back_populates="following",
        link_model=UserFollow,
        sa_relationship_kwargs={
            "primaryjoin": "User.id == UserFollow.followed_id",
            "secondaryjoin": "User.id == UserFollow.follower_id",
            "lazy": "selectin",
            "join_depth": 1
        }
    )

    def set_password(self, password: str):
        """Hash and store password securely"""
        if len(password) < 6:
            raise ValueError("Password must be at least 6 characters")
        self.hashed_password = pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify password against stored hash"""
        return pwd_context.verify(password, self.hashed_password)
