from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from proconnect.db.database import get_db
from proconnect.models.user import User
from proconnect.schemas.post import PostCreate, PostUpdate, PostRead, PostLikes
from proconnect.core.security import get_current_active_user
from proconnect.crud import post as post_crud

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_in: PostCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    post = await post_crud.create_post(db, post_in, current_user)
    return post_crud.format_post(post)


@router.get("", response_model=List[PostRead])
async def list_posts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return [post_crud.format_post(p) for p in await post_crud.get_posts(db)]


@router.get("/{post_id}", response_model=PostRead)
async def get_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return post_crud.format_post(await post_crud.get_post_or_404(db, post_id))


@router.put("/{post_id}", response_model=PostRead)
async def update_post(
    post_id: str,
    post_update: PostUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    post = await post_crud.update_post(db, post_id, post_update, current_user)
    return post_crud.format_post(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await post_crud.delete_post(db, post_id, current_user)


@router.put("/{post_id}/like", response_model=PostLikes)
async def like_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Like the post, or take the like back when the caller already likes it"""
    post = await post_crud.toggle_like(db, post_id, current_user)
    return PostLikes(id=post.id, likes=[u.id for u in post.liked_by])
