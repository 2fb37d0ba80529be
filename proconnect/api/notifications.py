from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from proconnect.db.database import get_db
from proconnect.models.user import User
from proconnect.schemas.notification import NotificationRead, MarkAllReadResponse
from proconnect.schemas.message import UnreadCount
from proconnect.core.security import get_current_active_user
from proconnect.crud import notification as notif_crud

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationRead])
async def get_notifications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await notif_crud.get_user_notifications(db, str(current_user.id))


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return UnreadCount(count=await notif_crud.get_unread_notification_count(db, str(current_user.id)))


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_as_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    updated = await notif_crud.mark_all_as_read(db, str(current_user.id))
    return MarkAllReadResponse(updated=updated)


@router.put("/{notif_id}/read", response_model=NotificationRead)
async def mark_notification_as_read(
    notif_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return await notif_crud.mark_as_read(db, notif_id, str(current_user.id))


@router.delete("/{notif_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notif_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await notif_crud.delete_notification(db, notif_id, str(current_user.id))
