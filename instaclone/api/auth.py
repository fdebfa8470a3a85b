"""
Account endpoints: registration and login
"""

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from instaclone.core.security import create_access_token
from instaclone.crud.user import create_user, authenticate_user
from instaclone.db.database import get_db
from instaclone.models.user import User
from instaclone.schemas.auth import AuthResponse
from instaclone.schemas.user import RegisterRequest, LoginRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User) -> dict:
    token, expires_at = create_access_token(user.id)
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_at": expires_at,
        "user": user
    }


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Email/password signup; the new account is signed in right away"""
    user = await create_user(db, user_in)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    user = await authenticate_user(db, credentials.email, credentials.password.get_secret_value())
    return _auth_response(user)


@router.post("/token", response_model=AuthResponse)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db)
):
    """OAuth2 password flow used by the interactive docs; `username` carries the email"""
    user = await authenticate_user(db, form_data.username, form_data.password)
    return _auth_response(user)
