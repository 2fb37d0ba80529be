from typing import List
from fastapi import APIRouter, Depends, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from proconnect.db.database import get_db
from proconnect.models.user import User
from proconnect.core.security import get_current_active_user
from proconnect.crud.post_comment import (
    create_comment,
    get_comments_for_post,
    delete_comment,
)
from proconnect.schemas.post_comment import (
    PostCommentCreate as CommentCreate,
    PostCommentRead as CommentRead
)


router = APIRouter(prefix="/comments", tags=["Comments"])


@router.post("", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def add_comment(
    comment_in: CommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await create_comment(db, comment_in, current_user)


@router.get("/post/{post_id}", response_model=List[CommentRead])
async def fetch_comments(
    post_id: str = Path(..., description="ID of the post to fetch comments for"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await get_comments_for_post(db, post_id)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await delete_comment(db, comment_id, current_user)
