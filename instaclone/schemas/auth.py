from datetime import datetime

from pydantic import BaseModel

from instaclone.schemas.user import UserRead


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead
