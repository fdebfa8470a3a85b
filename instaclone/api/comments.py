from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from instaclone.core.security import get_current_user
from instaclone.crud.post_comment import add_comment, delete_comment
from instaclone.db.database import get_db
from instaclone.models.user import User
from instaclone.schemas.post import PostRead, MessageResponse
from instaclone.schemas.post_comment import PostCommentCreate

router = APIRouter(prefix="/posts", tags=["Comments"])


@router.post("/{post_id}/comment", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def comment_on_post(
    post_id: str,
    comment_in: PostCommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await add_comment(db, post_id, current_user.id, comment_in)


@router.delete("/{post_id}/comment/{comment_id}", response_model=MessageResponse)
async def remove_comment(
    post_id: str,
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Allowed for the comment's author and for the owner of the post"""
    await delete_comment(db, post_id, comment_id, current_user.id)
    return {"message": "Comment deleted successfully"}
