from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .user import MinimalUserRead


class PostCommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=1000)

    @field_validator("text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment text is required")
        return v


class PostCommentRead(BaseModel):
    id: str
    text: str
    user: MinimalUserRead
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
