"""
User CRUD operations:
- Account creation and credential checks
- Profile lookup and partial updates
- Username search
"""

import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from instaclone.core.config import settings
from instaclone.core.exceptions import CustomHTTPException
from instaclone.models.user import User
from instaclone.schemas.user import RegisterRequest, ProfileUpdate

logger = logging.getLogger(__name__)


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    """Fresh user row with follower/following edges reloaded"""
    result = await session.execute(
        select(User)
        .options(selectinload(User.following), selectinload(User.followers))
        .where(User.id == str(user_id))
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_user_or_404(session: AsyncSession, user_id: str) -> User:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email.lower()))
    return result.scalars().first()


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def create_user(session: AsyncSession, user_in: RegisterRequest) -> User:
    """Create a new account; email and username must both be unused"""
    if await get_user_by_email(session, user_in.email):
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )
    if await get_user_by_username(session, user_in.username):
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken"
        )

    db_user = User(username=user_in.username, email=user_in.email.lower(), hashed_password="")
    db_user.set_password(user_in.password.get_secret_value())

    try:
        session.add(db_user)
        await session.commit()
    except IntegrityError:
        # lost a race against a concurrent registration with the same email or username
        await session.rollback()
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or username already registered"
        )

    logger.info(f"Registered user {db_user.id} ({db_user.username})")
    return await get_user_by_id(session, db_user.id)


async def authenticate_user(session: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(session, email)
    if not user or not user.verify_password(password):
        logger.warning(f"Failed login attempt for: {email}")
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await get_user_by_id(session, user.id)


async def update_profile(session: AsyncSession, current_user_id: str, profile_in: ProfileUpdate) -> User:
    """
    Apply a partial profile update for the calling user.
    Only fields present in the request body are written.
    """
    user = await get_user_or_404(session, current_user_id)
    provided = profile_in.model_fields_set

    # an empty username is ignored like an absent one
    if profile_in.username and profile_in.username != user.username:
        if await get_user_by_username(session, profile_in.username):
            raise CustomHTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already taken"
            )
        user.username = profile_in.username

    if "bio" in provided:
        user.bio = profile_in.bio or ""
    if "profile_image_url" in provided:
        user.profile_image_url = profile_in.profile_image_url or ""

    try:
        session.add(user)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken"
        )
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(f"Profile update failed for user {current_user_id}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )

    return await get_user_by_id(session, current_user_id)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search_users(session: AsyncSession, query: str, limit: Optional[int] = None) -> List[User]:
    """Case-insensitive substring match on username"""
    pattern = f"%{_escape_like(query)}%"
    result = await session.execute(
        select(User)
        .where(User.username.ilike(pattern, escape="\\"))
        .order_by(User.username)
        .limit(limit or settings.USER_SEARCH_LIMIT)
    )
    return list(result.scalars().all())
