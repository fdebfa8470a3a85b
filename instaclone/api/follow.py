from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from instaclone.core.security import get_current_user
from instaclone.crud import follow as follow_crud
from instaclone.db.database import get_db
from instaclone.models.user import User
from instaclone.schemas.post import MessageResponse
from instaclone.schemas.user import MinimalUserRead

router = APIRouter(prefix="/users", tags=["follow"])


@router.put("/{user_id}/follow", response_model=MessageResponse)
async def follow_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await follow_crud.follow_user(db, current_user.id, user_id)
    return {"message": "User followed successfully"}


@router.put("/{user_id}/unfollow", response_model=MessageResponse)
async def unfollow_user(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await follow_crud.unfollow_user(db, current_user.id, user_id)
    return {"message": "User unfollowed successfully"}


@router.get("/{user_id}/followers", response_model=List[MinimalUserRead])
async def get_followers(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await follow_crud.get_followers(db, user_id)


@router.get("/{user_id}/following", response_model=List[MinimalUserRead])
async def get_following(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await follow_crud.get_following(db, user_id)
