import logging
from typing import List

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from instaclone.core.exceptions import CustomHTTPException
from instaclone.crud.user import get_user_or_404
from instaclone.models.follow import UserFollow
from instaclone.models.user import User

logger = logging.getLogger(__name__)


async def _get_follow(db: AsyncSession, follower_id: str, followed_id: str):
    result = await db.execute(
        select(UserFollow).where(
            UserFollow.follower_id == follower_id,
            UserFollow.followed_id == followed_id
        )
    )
    return result.scalar_one_or_none()


async def follow_user(db: AsyncSession, current_user_id: str, target_id: str) -> UserFollow:
    """Create a follow relationship between users.

    One edge row makes the caller a follower of the target and the target a
    followed user of the caller, so both sides change in the same commit.
    """
    if target_id == current_user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot follow yourself"
        )

    await get_user_or_404(db, target_id)

    if await _get_follow(db, current_user_id, target_id):
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Already following this user"
        )

    follow_entry = UserFollow(follower_id=current_user_id, followed_id=target_id)
    try:
        db.add(follow_entry)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Already following this user"
        )
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Follow {current_user_id} -> {target_id} failed")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to follow user"
        )

    logger.info(f"User {current_user_id} followed {target_id}")
    return follow_entry


async def unfollow_user(db: AsyncSession, current_user_id: str, target_id: str) -> None:
    """Remove a follow relationship between users"""
    await get_user_or_404(db, target_id)

    follow_entry = await _get_follow(db, current_user_id, target_id)
    if not follow_entry:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Not following this user"
        )

    try:
        await db.delete(follow_entry)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Unfollow {current_user_id} -> {target_id} failed")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to unfollow user"
        )

    logger.info(f"User {current_user_id} unfollowed {target_id}")


async def get_following(db: AsyncSession, user_id: str) -> List[User]:
    """Get all users that a given user is following"""
    await get_user_or_404(db, user_id)
    result = await db.execute(
        select(User)
        .join(UserFollow, User.id == UserFollow.followed_id)
        .where(UserFollow.follower_id == user_id)
        .order_by(UserFollow.created_at)
    )
    return list(result.scalars().all())


async def get_followers(db: AsyncSession, user_id: str) -> List[User]:
    """Get all users following a given user"""
    await get_user_or_404(db, user_id)
    result = await db.execute(
        select(User)
        .join(UserFollow, User.id == UserFollow.follower_id)
        .where(UserFollow.followed_id == user_id)
        .order_by(UserFollow.created_at)
    )
    return list(result.scalars().all())
