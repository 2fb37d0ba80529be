from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from proconnect.db.database import get_db
from proconnect.models.user import User
from proconnect.schemas.message import MessageCreate, MessageRead, UnreadCount
from proconnect.schemas.user import UserBrief
from proconnect.core.security import get_current_active_user
from proconnect.crud import message as msg_crud
from proconnect.utils.connection_helpers import format_profiles

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_in: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await msg_crud.send_message(db, current_user, message_in.recipient_id, message_in.content)


@router.get("/conversations", response_model=List[UserBrief])
async def get_conversations(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Everyone the current user has exchanged messages with"""
    return format_profiles(await msg_crud.get_conversation_partners(db, current_user.id))


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return UnreadCount(count=await msg_crud.get_unread_message_count(db, current_user.id))


@router.get("/{user_id}", response_model=List[MessageRead])
async def get_thread(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Conversation with one user; their messages to the caller are marked read"""
    return await msg_crud.get_thread(db, current_user.id, user_id)
