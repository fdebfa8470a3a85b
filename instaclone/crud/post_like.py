import logging
from typing import Optional, Tuple

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from instaclone.core.exceptions import CustomHTTPException
from instaclone.models.post import Post
from instaclone.models.post_like import PostLike

logger = logging.getLogger(__name__)


async def count_likes(db: AsyncSession, post_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(PostLike).where(PostLike.post_id == post_id)
    )
    return result.scalar_one()


async def find_like(db: AsyncSession, post_id: str, user_id: str) -> Optional[PostLike]:
    result = await db.execute(
        select(PostLike).where(
            PostLike.user_id == user_id,
            PostLike.post_id == post_id
        )
    )
    return result.scalar_one_or_none()


async def toggle_like(db: AsyncSession, post_id: str, user_id: str) -> Tuple[bool, int]:
    """
    Like the post if the caller has not liked it yet, otherwise unlike it.
    Returns (liked, like_count) after the toggle.
    """
    post_exists = await db.execute(select(Post.id).where(Post.id == post_id))
    if post_exists.scalar_one_or_none() is None:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )

    existing = await find_like(db, post_id, user_id)

    try:
        if existing:
            await db.delete(existing)
            liked = False
        else:
            db.add(PostLike(user_id=user_id, post_id=post_id))
            liked = True
        await db.commit()
    except IntegrityError:
        # a concurrent toggle inserted the same like first
        await db.rollback()
        liked = True
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to toggle like on post {post_id} for user {user_id}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update like"
        )

    return liked, await count_likes(db, post_id)
