"""
post endpoints implementation
- Post creation
- Feed display
- Post management
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from instaclone.core.security import get_current_user
from instaclone.crud.post import (
    create_post,
    get_post_or_404,
    update_post,
    delete_post,
    get_feed_posts,
    get_posts_by_user,
)
from instaclone.db.database import get_db
from instaclone.models.user import User
from instaclone.schemas.post import PostCreate, PostRead, PostUpdate, MessageResponse

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_new_post(
    *,
    post_in: PostCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a new post owned by the caller.

    Required Fields:
    - image_url: reference to the uploaded image
    Optional:
    - caption
    """
    return await create_post(db, post_in, current_user.id)


@router.get("/feed", response_model=List[PostRead])
async def read_feed(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Newest posts from the caller and the users the caller follows (50 max)
    """
    return await get_feed_posts(db, current_user.id)


@router.get("/user/{user_id}", response_model=List[PostRead])
async def read_user_posts(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await get_posts_by_user(db, user_id)


@router.get("/{post_id}", response_model=PostRead)
async def read_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await get_post_or_404(db, post_id)


@router.put("/{post_id}", response_model=PostRead)
async def update_existing_post(
    post_id: str,
    post_in: PostUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Update a post's caption.

    Rules:
    - Only the post author can update their posts
    """
    return await update_post(db, post_id, post_in, current_user.id)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_existing_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Delete a post together with its comments and likes.

    Rules:
    - Only the post author can delete their posts
    """
    await delete_post(db, post_id, current_user.id)
    return {"message": "Post deleted successfully"}
