from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from instaclone.core.security import get_current_user
from instaclone.crud.user import get_user_or_404, update_profile, search_users
from instaclone.db.database import get_db
from instaclone.models.user import User
from instaclone.schemas.user import UserRead, ProfileUpdate, ProfileUpdateResponse, UserSearchResult

router = APIRouter(prefix="/users", tags=["Profiles"])


@router.get("/me/profile", response_model=UserRead)
async def read_own_profile(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await get_user_or_404(db, current_user.id)


@router.get("/search/{query}", response_model=List[UserSearchResult])
async def search_users_endpoint(
    query: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await search_users(db, query)


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_own_profile(
    profile_in: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Update username, bio or profile picture.
    Omitted fields keep their value; an empty string clears bio or picture.
    """
    user = await update_profile(db, current_user.id, profile_in)
    return {"message": "Profile updated successfully", "user": user}


@router.get("/{user_id}", response_model=UserRead)
async def read_profile(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await get_user_or_404(db, user_id)
