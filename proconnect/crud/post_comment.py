import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from proconnect.models.post import Post
from proconnect.models.post_comment import PostComment
from proconnect.models.user import User
from proconnect.schemas.post_comment import PostCommentCreate
from proconnect.core.exceptions import NotFoundError, UnauthorizedError
from proconnect.core.error_codes import (
    POST_NOT_FOUND,
    COMMENT_NOT_FOUND,
    COMMENT_DELETE_PERMISSION_DENIED,
)
from proconnect.db.database import transaction

logger = logging.getLogger(__name__)


async def get_comment_by_id(db: AsyncSession, comment_id: str) -> PostComment:
    result = await db.execute(
        select(PostComment)
        .options(selectinload(PostComment.author))
        .where(PostComment.id == str(comment_id))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_comment(db: AsyncSession, comment_in: PostCommentCreate, current_user: User) -> PostComment:
    post = await db.get(Post, comment_in.post_id)
    if not post:
        raise NotFoundError("Post not found", POST_NOT_FOUND)

    comment = PostComment(
        text=comment_in.text,
        post_id=post.id,
        author_id=current_user.id,
    )
    async with transaction(db, "Failed to create comment"):
        db.add(comment)

    logger.info(f"Comment {comment.id} added to post {post.id} by {current_user.id}")
    return await get_comment_by_id(db, comment.id)


async def get_comments_for_post(db: AsyncSession, post_id: str) -> List[PostComment]:
    """Comments on a post, newest first"""
    result = await db.execute(
        select(PostComment)
        .options(selectinload(PostComment.author))
        .where(PostComment.post_id == str(post_id))
        .order_by(PostComment.created_at.desc())
    )
    return result.scalars().all()


async def delete_comment(db: AsyncSession, comment_id: str, current_user: User) -> None:
    comment = await get_comment_by_id(db, comment_id)
    if not comment:
        raise NotFoundError("Comment not found", COMMENT_NOT_FOUND)
    if comment.author_id != current_user.id:
        raise UnauthorizedError("Not authorized to delete this comment", COMMENT_DELETE_PERMISSION_DENIED)

    async with transaction(db, "Failed to delete comment"):
        await db.delete(comment)

    logger.info(f"Comment {comment_id} deleted by {current_user.id}")
