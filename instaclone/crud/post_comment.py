import logging

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from instaclone.core.exceptions import CustomHTTPException
from instaclone.crud.post import get_post, get_post_or_404
from instaclone.models.post import Post
from instaclone.models.post_comment import PostComment
from instaclone.schemas.post_comment import PostCommentCreate

logger = logging.getLogger(__name__)


async def add_comment(
    db: AsyncSession,
    post_id: str,
    user_id: str,
    data: PostCommentCreate
) -> Post:
    """Append a comment by the caller; returns the post with its full thread"""
    await get_post_or_404(db, post_id)

    comment = PostComment(post_id=post_id, user_id=user_id, text=data.text)
    try:
        db.add(comment)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to add comment to post {post_id}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add comment"
        )

    return await get_post(db, post_id)


async def delete_comment(db: AsyncSession, post_id: str, comment_id: str, current_user_id: str) -> None:
    """Delete a comment; allowed for the comment's author and for the post's owner"""
    post_result = await db.execute(select(Post.user_id).where(Post.id == post_id))
    post_owner_id = post_result.scalar_one_or_none()
    if post_owner_id is None:
        raise CustomHTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")

    result = await db.execute(
        select(PostComment).where(PostComment.id == comment_id, PostComment.post_id == post_id)
    )
    comment = result.scalar_one_or_none()
    if not comment:
        raise CustomHTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")

    if current_user_id not in (comment.user_id, post_owner_id):
        raise CustomHTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to delete this comment"
        )

    try:
        await db.delete(comment)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(f"Failed to delete comment {comment_id}")
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete comment"
        )
