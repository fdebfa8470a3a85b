from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from instaclone.core.security import get_current_user
from instaclone.crud.post_like import toggle_like
from instaclone.db.database import get_db
from instaclone.models.user import User
from instaclone.schemas.post import LikeToggleResponse

router = APIRouter(prefix="/posts", tags=["Likes"])


@router.put("/{post_id}/like", response_model=LikeToggleResponse)
async def like_or_unlike_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    liked, count = await toggle_like(db, post_id, current_user.id)
    return {
        "message": "Post liked" if liked else "Post unliked",
        "liked": liked,
        "likes": count,
    }
