"""
Post CRUD operations with:
- Owner and comment-author projections loaded eagerly
- Following + self feed
- Owner-only updates and deletes
"""

import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from instaclone.core.config import settings
from instaclone.core.exceptions import CustomHTTPException
from instaclone.models.follow import UserFollow
from instaclone.models.post import Post
from instaclone.models.post_comment import PostComment
from instaclone.schemas.post import PostCreate, PostUpdate

logger = logging.getLogger(__name__)


def _post_query():
    return (
        select(Post)
        .options(
            selectinload(Post.user),
            selectinload(Post.likes),
            selectinload(Post.comments).selectinload(PostComment.user),
        )
        .execution_options(populate_existing=True)
    )


async def get_post(session: AsyncSession, post_id: str) -> Optional[Post]:
    """Retrieve a post with its owner, likes and comment authors"""
    result = await session.execute(_post_query().where(Post.id == str(post_id)))
    return result.scalars().first()


async def get_post_or_404(session: AsyncSession, post_id: str) -> Post:
    post = await get_post(session, post_id)
    if not post:
        raise CustomHTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return post


async def create_post(session: AsyncSession, post_in: PostCreate, current_user_id: str) -> Post:
    """Create a post owned by the caller, with no likes or comments yet"""
    db_post = Post(
        user_id=current_user_id,
        image_url=post_in.image_url,
        caption=post_in.caption or "",
    )
    try:
        session.add(db_post)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(f"Failed to create post for user {current_user_id}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )

    return await get_post(session, db_post.id)


async def get_feed_posts(session: AsyncSession, current_user_id: str, limit: Optional[int] = None) -> List[Post]:
    """
    Posts by the caller and by everyone the caller follows, newest first.
    Ties on created_at are broken by id so a single call is deterministic.
    """
    followed_ids = select(UserFollow.followed_id).where(UserFollow.follower_id == current_user_id)
    result = await session.execute(
        _post_query()
        .where(or_(Post.user_id == current_user_id, Post.user_id.in_(followed_ids)))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit or settings.FEED_LIMIT)
    )
    return list(result.scalars().all())


async def get_posts_by_user(session: AsyncSession, user_id: str) -> List[Post]:
    result = await session.execute(
        _post_query()
        .where(Post.user_id == str(user_id))
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    return list(result.scalars().all())


def _ensure_owner(post: Post, current_user_id: str, action: str) -> None:
    if post.user_id != current_user_id:
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} this post"
        )


async def update_post(session: AsyncSession, post_id: str, post_in: PostUpdate, current_user_id: str) -> Post:
    """Update the caption; only the owner may do this. An empty caption keeps the current one"""
    post = await get_post_or_404(session, post_id)
    _ensure_owner(post, current_user_id, "update")

    if post_in.caption:
        post.caption = post_in.caption
        try:
            session.add(post)
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            logger.exception(f"Failed to update post {post_id}")
            raise CustomHTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update post"
            )

    return await get_post(session, post_id)


async def delete_post(session: AsyncSession, post_id: str, current_user_id: str) -> None:
    """Delete a post with its comments and likes; only the owner may do this"""
    post = await get_post_or_404(session, post_id)
    _ensure_owner(post, current_user_id, "delete")

    try:
        await session.delete(post)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception(f"Failed to delete post {post_id}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete post"
        )

    logger.info(f"Post {post_id} deleted by {current_user_id}")
