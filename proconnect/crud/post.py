import logging
from typing import List, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError
from proconnect.models.post import Post, PostLike
from proconnect.models.user import User
from proconnect.schemas.post import PostCreate, PostUpdate, PostRead
from proconnect.core.exceptions import NotFoundError, UnauthorizedError
from proconnect.core.error_codes import (
    POST_NOT_FOUND,
    POST_UPDATE_PERMISSION_DENIED,
    POST_DELETE_PERMISSION_DENIED,
)
from proconnect.db.database import transaction
from proconnect.utils.connection_helpers import brief_user

logger = logging.getLogger(__name__)


def _post_options():
    return (
        selectinload(Post.author),
        selectinload(Post.liked_by),
        selectinload(Post.comments),
    )


def format_post(post: Post) -> PostRead:
    return PostRead(
        id=post.id,
        author_id=post.author_id,
        content=post.content,
        image=post.image or "",
        created_at=post.created_at,
        updated_at=post.updated_at,
        author=brief_user(post.author) if post.author else None,
        likes=[u.id for u in post.liked_by],
        comments=[c.id for c in post.comments],
    )


async def get_post(session: AsyncSession, post_id: str) -> Optional[Post]:
    result = await session.execute(
        select(Post)
        .options(*_post_options())
        .where(Post.id == str(post_id))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_post_or_404(session: AsyncSession, post_id: str) -> Post:
    post = await get_post(session, post_id)
    if not post:
        raise NotFoundError("Post not found", POST_NOT_FOUND)
    return post


async def create_post(session: AsyncSession, post_in: PostCreate, current_user: User) -> Post:
    post = Post(
        author_id=current_user.id,
        content=post_in.content,
        image=post_in.image or "",
    )
    async with transaction(session, "Failed to create post"):
        session.add(post)

    logger.info(f"Post {post.id} created by {current_user.id}")
    return await get_post(session, post.id)


async def get_posts(session: AsyncSession) -> List[Post]:
    """All posts, newest first"""
    result = await session.execute(
        select(Post)
        .options(*_post_options())
        .order_by(Post.created_at.desc())
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


async def update_post(session: AsyncSession, post_id: str, post_update: PostUpdate, current_user: User) -> Post:
    post = await get_post_or_404(session, post_id)

    if post.author_id != current_user.id:
        raise UnauthorizedError("Not authorized to update this post", POST_UPDATE_PERMISSION_DENIED)

    update_data = post_update.dict(exclude_unset=True)
    # An empty or missing content keeps the current text
    if update_data.get("content"):
        post.content = update_data["content"]
    post.updated_at = datetime.utcnow()

    async with transaction(session, "Failed to update post"):
        session.add(post)

    return await get_post(session, post.id)


async def delete_post(session: AsyncSession, post_id: str, current_user: User) -> None:
    """Delete a post together with its likes and comments"""
    post = await get_post_or_404(session, post_id)

    if post.author_id != current_user.id:
        raise UnauthorizedError("Not authorized to delete this post", POST_DELETE_PERMISSION_DENIED)

    # Comments go through the delete-orphan cascade of Post.comments
    async with transaction(session, "Failed to delete post"):
        await session.execute(delete(PostLike).where(PostLike.post_id == post.id))
        await session.delete(post)

    logger.info(f"Post {post_id} deleted by {current_user.id}")


async def toggle_like(session: AsyncSession, post_id: str, current_user: User) -> Post:
    """Flip the caller's membership in the post's like set"""
    post = await get_post_or_404(session, post_id)
    post_id, user_id = post.id, current_user.id

    try:
        async with transaction(session, "Failed to update like"):
            existing = await session.get(PostLike, (post_id, user_id))
            if existing:
                await session.delete(existing)
            else:
                session.add(PostLike(post_id=post_id, user_id=user_id))
    except IntegrityError:
        # A concurrent request added the same like; report the stored state
        logger.warning(f"Duplicate like on post {post_id} by {user_id} ignored")

    return await get_post_or_404(session, post_id)
