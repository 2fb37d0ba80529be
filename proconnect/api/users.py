"""
Profile endpoints
- Own profile viewing and management
- User directory
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from proconnect.db.database import get_db
from proconnect.models.user import User
from proconnect.schemas.user import UserPublic, UserUpdate, UserBrief
from proconnect.core.security import get_current_active_user
from proconnect.crud.user import get_user_or_404, update_user, list_users
from proconnect.crud.connection import get_connection_ids
from proconnect.utils.connection_helpers import format_profile, format_profiles

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=UserPublic)
async def get_own_profile(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return format_profile(current_user, await get_connection_ids(db, current_user.id))


@router.put("/profile", response_model=UserPublic)
async def update_own_profile(
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    user = await update_user(db, current_user, user_update)
    return format_profile(user, await get_connection_ids(db, user.id))


@router.get("", response_model=List[UserBrief])
async def get_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return format_profiles(await list_users(db))


@router.get("/{user_id}", response_model=UserPublic)
async def get_user_profile(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    user = await get_user_or_404(db, user_id)
    return format_profile(user, await get_connection_ids(db, user.id))
