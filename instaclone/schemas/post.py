"""
Pydantic schemas for post data validation and serialization.
"""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from instaclone.schemas.user import MinimalUserRead
from instaclone.schemas.post_comment import PostCommentRead


class PostCreate(BaseModel):
    """Schema for post creation requests"""
    image_url: str = Field(..., min_length=1, max_length=2048)
    caption: Optional[str] = Field("", max_length=2200)


class PostUpdate(BaseModel):
    """Only the caption is editable; omitting it, null or an empty string keeps the current one"""
    caption: Optional[str] = Field(None, max_length=2200)


class PostRead(BaseModel):
    id: str
    user: MinimalUserRead
    image_url: str
    caption: str = ""
    likes: List[str] = Field(default_factory=list)
    comments: List[PostCommentRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("likes", mode="before")
    @classmethod
    def liking_user_ids(cls, v):
        return [like if isinstance(like, str) else like.user_id for like in v or []]

    model_config = ConfigDict(from_attributes=True)


class LikeToggleResponse(BaseModel):
    message: str
    liked: bool
    likes: int


class MessageResponse(BaseModel):
    message: str
