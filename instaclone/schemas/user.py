from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, EmailStr, SecretStr, Field, field_validator, model_validator

USERNAME_PATTERN = r"^[A-Za-z0-9._]+$"


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: SecretStr
    password_confirmation: Optional[SecretStr] = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def passwords_match(self):
        if (
            self.password_confirmation is not None
            and self.password_confirmation.get_secret_value() != self.password.get_secret_value()
        ):
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: SecretStr


class ProfileUpdate(BaseModel):
    """Partial profile update.

    Fields left out of the request body are not touched; an explicit empty
    string clears ``bio`` or ``profile_image_url`` and is ignored for
    ``username``.
    """
    username: Optional[str] = Field(None, max_length=30)
    bio: Optional[str] = Field(None, max_length=500)
    profile_image_url: Optional[str] = None


class MinimalUserRead(BaseModel):
    id: str
    username: str
    profile_image_url: str = ""

    model_config = ConfigDict(from_attributes=True)


class UserSearchResult(MinimalUserRead):
    bio: str = ""


class UserRead(BaseModel):
    """Full profile, without the credential hash"""
    id: str
    username: str
    email: str
    bio: str = ""
    profile_image_url: str = ""
    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("followers", "following", mode="before")
    @classmethod
    def user_ids(cls, v):
        return [u if isinstance(u, str) else u.id for u in v or []]

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserRead
