"""
User CRUD operations:
- Registration and credential checks
- Profile reads and updates
"""
import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from fastapi import status
from fastapi.encoders import jsonable_encoder
from proconnect.models.user import User
from proconnect.schemas.user import UserCreate, UserUpdate
from proconnect.core.exceptions import CustomHTTPException, InvalidOperationError, NotFoundError
from proconnect.core.error_codes import (
    USER_ALREADY_EXISTS,
    USER_NOT_FOUND,
    DATABASE_ERROR,
)

logger = logging.getLogger(__name__)


async def get_user_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
    result = await session.execute(
        select(User).where(User.id == str(user_id))
    )
    return result.scalars().first()


async def get_user_or_404(session: AsyncSession, user_id: str, detail: str = "User not found",
                          error_code: str = USER_NOT_FOUND) -> User:
    user = await get_user_by_id(session, user_id)
    if not user:
        raise NotFoundError(detail, error_code)
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Case-insensitive email lookup"""
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    )
    return result.scalars().first()


async def create_user(session: AsyncSession, user_data: UserCreate) -> User:
    """Create a new user account; emails are stored lower-cased"""
    email = str(user_data.email).strip().lower()
    if await get_user_by_email(session, email):
        raise InvalidOperationError("Email already registered", USER_ALREADY_EXISTS)

    db_user = User(name=user_data.name, email=email, hashed_password="")
    db_user.set_password(user_data.password.get_secret_value())

    try:
        session.add(db_user)
        await session.commit()
        await session.refresh(db_user)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await session.rollback()
        raise InvalidOperationError("Email already registered", USER_ALREADY_EXISTS)

    logger.info(f"Registered user {db_user.id}")
    return db_user


async def authenticate_user(session: AsyncSession, email: str, password: str) -> Optional[User]:
    user = await get_user_by_email(session, email)
    if not user or not user.check_password(password):
        return None
    return user


async def update_user(session: AsyncSession, user: User, user_update: UserUpdate) -> User:
    update_data = user_update.dict(exclude_unset=True)

    if "email" in update_data and update_data["email"] is not None:
        new_email = str(update_data["email"]).strip().lower()
        if new_email != user.email:
            existing = await get_user_by_email(session, new_email)
            if existing and existing.id != user.id:
                raise InvalidOperationError("Email already registered", USER_ALREADY_EXISTS)
        update_data["email"] = new_email

    # Missing or null fields keep their stored value
    for field, value in update_data.items():
        if value is None:
            continue
        if field == "experience":
            value = jsonable_encoder(user_update.experience)
        setattr(user, field, value)

    user_id = user.id
    try:
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user
    except IntegrityError:
        # Lost a race with another account taking the same email
        await session.rollback()
        raise InvalidOperationError("Email already registered", USER_ALREADY_EXISTS)
    except SQLAlchemyError:
        await session.rollback()
        logger.error(f"Failed to update user {user_id}", exc_info=True)
        raise CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile",
            error_code=DATABASE_ERROR
        )


async def list_users(session: AsyncSession) -> List[User]:
    result = await session.execute(select(User).order_by(User.created_at))
    return result.scalars().all()


async def get_users_by_ids(session: AsyncSession, user_ids: List[str]) -> List[User]:
    if not user_ids:
        return []
    result = await session.execute(select(User).where(User.id.in_(user_ids)))
    return result.scalars().all()
