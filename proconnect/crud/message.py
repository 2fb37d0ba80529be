import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, or_, and_
from sqlalchemy import update, func
from sqlalchemy.orm import joinedload
from proconnect.models.message import Message
from proconnect.models.user import User
from proconnect.core.events import MessageSent
from proconnect.core.exceptions import NotFoundError, InvalidOperationError
from proconnect.core.error_codes import RECIPIENT_NOT_FOUND, USER_NOT_FOUND, MESSAGE_SELF_SEND
from proconnect.crud.notification import record_event
from proconnect.crud.user import get_user_by_id, get_users_by_ids
from proconnect.db.database import transaction

logger = logging.getLogger(__name__)


def _with_parties():
    return (joinedload(Message.sender), joinedload(Message.recipient))


async def send_message(db: AsyncSession, sender: User, recipient_id: str, content: str) -> Message:
    """
    Persist a message and stage its notification in the same commit.
    A notification is only created when the recipient has no unread message
    notification from this sender yet.
    """
    recipient = await get_user_by_id(db, recipient_id)
    if not recipient:
        raise NotFoundError("Recipient not found", RECIPIENT_NOT_FOUND)

    if recipient.id == sender.id:
        raise InvalidOperationError("Cannot send message to yourself", MESSAGE_SELF_SEND)

    message = Message(sender_id=sender.id, recipient_id=recipient.id, content=content, read=False)

    async with transaction(db, "Failed to send message"):
        db.add(message)
        await record_event(db, MessageSent(
            actor_id=sender.id,
            actor_name=sender.name,
            message_id=message.id,
            recipient_id=recipient.id,
            content=content,
        ))

    logger.info(f"Message {message.id} sent: {sender.id} -> {recipient.id}")

    result = await db.execute(
        select(Message)
        .options(*_with_parties())
        .where(Message.id == message.id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def get_thread(db: AsyncSession, user_id: str, other_user_id: str) -> List[Message]:
    """
    Every message between two users, oldest first.

    Messages from the peer to the caller are marked read in bulk once the
    thread has been fetched; the returned list shows the state before that.
    """
    other = await get_user_by_id(db, other_user_id)
    if not other:
        raise NotFoundError("User not found", USER_NOT_FOUND)

    result = await db.execute(
        select(Message)
        .options(*_with_parties())
        .where(
            or_(
                and_(Message.sender_id == user_id, Message.recipient_id == other.id),
                and_(Message.sender_id == other.id, Message.recipient_id == user_id)
            )
        )
        .order_by(Message.created_at.asc())
        .execution_options(populate_existing=True)
    )
    messages = result.scalars().all()

    async with transaction(db, "Failed to mark messages as read"):
        await db.execute(
            update(Message)
            .where(
                Message.recipient_id == user_id,
                Message.sender_id == other.id,
                Message.read == False  # noqa: E712
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )

    return messages


async def get_conversation_partners(db: AsyncSession, user_id: str) -> List[User]:
    """Distinct users the caller has exchanged messages with, in order of first message"""
    result = await db.execute(
        select(Message.sender_id, Message.recipient_id)
        .where(
            or_(
                Message.sender_id == user_id,
                Message.recipient_id == user_id
            )
        )
        .order_by(Message.created_at.asc())
    )

    peer_ids = {}
    for sender_id, recipient_id in result.all():
        peer_id = recipient_id if sender_id == user_id else sender_id
        peer_ids.setdefault(peer_id, None)

    users = {u.id: u for u in await get_users_by_ids(db, list(peer_ids))}
    return [users[peer_id] for peer_id in peer_ids if peer_id in users]


async def get_unread_message_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        select(func.count(Message.id))
        .where(
            Message.recipient_id == user_id,
            Message.read == False  # noqa: E712
        )
    )
    return result.scalar()
