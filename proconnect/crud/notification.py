import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import SQLAlchemyError
from fastapi import status
from proconnect.models.notification import Notification
from proconnect.core.events import DomainEvent, ConnectionRequested, ConnectionAccepted, MessageSent
from proconnect.core.exceptions import CustomHTTPException, NotFoundError, UnauthorizedError
from proconnect.core.error_codes import (
    NOTIFICATION_NOT_FOUND,
    NOTIFICATION_PERMISSION_DENIED,
    DATABASE_ERROR,
)
from proconnect.schemas.enums import NotificationType, RelatedModel

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_LENGTH = 50


def message_preview(content: str, limit: int = MESSAGE_PREVIEW_LENGTH) -> str:
    return content[:limit] + ("..." if len(content) > limit else "")


def _add_notification(db: AsyncSession, **fields) -> Notification:
    """Stage a new unread notification on the caller's session"""
    notification = Notification(read=False, **fields)
    db.add(notification)
    return notification


async def _on_connection_requested(db: AsyncSession, event: ConnectionRequested):
    return _add_notification(
        db,
        recipient_id=event.recipient_id,
        sender_id=event.actor_id,
        type=NotificationType.CONNECTION_REQUEST.value,
        content=f"{event.actor_name} sent you a connection request",
        related_id=event.connection_id,
        related_model=RelatedModel.CONNECTION.value,
    )


async def _on_connection_accepted(db: AsyncSession, event: ConnectionAccepted):
    return _add_notification(
        db,
        recipient_id=event.requester_id,
        sender_id=event.actor_id,
        type=NotificationType.CONNECTION_ACCEPTED.value,
        content=f"{event.actor_name} accepted your connection request",
        related_id=event.connection_id,
        related_model=RelatedModel.CONNECTION.value,
    )


async def _on_message_sent(db: AsyncSession, event: MessageSent):
    # An unread message notification from the same sender already covers this one
    result = await db.execute(
        select(Notification)
        .where(
            Notification.recipient_id == event.recipient_id,
            Notification.sender_id == event.actor_id,
            Notification.type == NotificationType.MESSAGE.value,
            Notification.read == False  # noqa: E712
        )
        .order_by(Notification.created_at.desc())
        .limit(1)
    )
    if result.scalars().first():
        logger.debug(f"Suppressed message notification {event.actor_id} -> {event.recipient_id}")
        return None

    return _add_notification(
        db,
        recipient_id=event.recipient_id,
        sender_id=event.actor_id,
        type=NotificationType.MESSAGE.value,
        content=f"New message from {event.actor_name}: {message_preview(event.content)}",
        related_id=event.message_id,
        related_model=RelatedModel.MESSAGE.value,
    )


_HANDLERS = {
    ConnectionRequested: _on_connection_requested,
    ConnectionAccepted: _on_connection_accepted,
    MessageSent: _on_message_sent,
}


async def record_event(db: AsyncSession, event: DomainEvent):
    """
    Turn a domain event into its notification, if any.

    The notification is only staged on `db`; it becomes durable with the
    publisher's commit, so a failed publisher leaves no orphan notification.
    Returns the staged Notification or None when suppressed.
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"No notification handler for {type(event).__name__}")
    return await handler(db, event)


async def get_user_notifications(db: AsyncSession, user_id: str) -> List[Notification]:
    """All notifications for a user, newest first, with the sender loaded"""
    result = await db.execute(
        select(Notification)
        .where(Notification.recipient_id == user_id)
        .options(selectinload(Notification.sender))
        .order_by(Notification.created_at.desc())
    )
    return result.scalars().all()


async def get_unread_notification_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count(Notification.id))
        .where(
            Notification.recipient_id == user_id,
            Notification.read == False  # noqa: E712
        )
    )
    return result.scalar()


async def _get_owned_notification(db: AsyncSession, notif_id: str, user_id: str, action: str) -> Notification:
    result = await db.execute(
        select(Notification)
        .options(selectinload(Notification.sender))
        .where(Notification.id == notif_id)
    )
    notification = result.scalar_one_or_none()
    if not notification:
        raise NotFoundError("Notification not found", NOTIFICATION_NOT_FOUND)
    if notification.recipient_id != user_id:
        raise UnauthorizedError(f"Not authorized to {action} this notification", NOTIFICATION_PERMISSION_DENIED)
    return notification


async def mark_as_read(db: AsyncSession, notif_id: str, user_id: str) -> Notification:
    notification = await _get_owned_notification(db, notif_id, user_id, "mark")
    if not notification.read:
        notification.read = True
        try:
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.error(f"Failed to mark notification {notif_id} as read", exc_info=True)
            raise CustomHTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update notification", DATABASE_ERROR)
    return notification


async def mark_all_as_read(db: AsyncSession, user_id: str) -> int:
    try:
        result = await db.execute(
            update(Notification)
            .where(
                Notification.recipient_id == user_id,
                Notification.read == False  # noqa: E712
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to mark notifications read for {user_id}", exc_info=True)
        raise CustomHTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update notifications", DATABASE_ERROR)


async def delete_notification(db: AsyncSession, notif_id: str, user_id: str) -> None:
    notification = await _get_owned_notification(db, notif_id, user_id, "delete")
    try:
        await db.delete(notification)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Failed to delete notification {notif_id}", exc_info=True)
        raise CustomHTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete notification", DATABASE_ERROR)
