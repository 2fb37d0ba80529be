import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, or_, and_
from sqlalchemy import delete
from sqlalchemy.orm import joinedload
from sqlalchemy.exc import IntegrityError
from proconnect.models.connection import Connection, make_pair_key
from proconnect.models.user import User, UserConnection
from proconnect.schemas.enums import ConnectionStatus
from proconnect.core.events import ConnectionRequested, ConnectionAccepted
from proconnect.core.exceptions import (
    NotFoundError,
    UnauthorizedError,
    InvalidOperationError,
    ConflictError,
)
from proconnect.core.error_codes import (
    USER_NOT_FOUND,
    CONNECTION_NOT_FOUND,
    CONNECTION_SELF_REQUEST,
    CONNECTION_ALREADY_EXISTS,
    CONNECTION_NOT_PENDING,
    CONNECTION_PERMISSION_DENIED,
)
from proconnect.crud.notification import record_event
from proconnect.crud.user import get_user_by_id
from proconnect.db.database import transaction


logger = logging.getLogger(__name__)


def _with_parties():
    return (joinedload(Connection.requester), joinedload(Connection.recipient))


async def get_connection(db: AsyncSession, connection_id: str) -> Optional[Connection]:
    """Load a connection with both parties, refreshing any stale copy in the session"""
    result = await db.execute(
        select(Connection)
        .options(*_with_parties())
        .where(Connection.id == str(connection_id))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_connection_between(db: AsyncSession, user_id: str, other_user_id: str) -> Optional[Connection]:
    """Any connection between two users, in either direction and any status"""
    result = await db.execute(
        select(Connection).where(
            or_(
                and_(
                    Connection.requester_id == user_id,
                    Connection.recipient_id == other_user_id
                ),
                and_(
                    Connection.requester_id == other_user_id,
                    Connection.recipient_id == user_id
                )
            )
        )
    )
    return result.scalars().first()


async def add_to_connection_set(db: AsyncSession, user_id: str, peer_id: str) -> None:
    """Stage `peer_id` into `user_id`'s connection set; no-op when already present"""
    if await db.get(UserConnection, (user_id, peer_id)) is None:
        db.add(UserConnection(user_id=user_id, peer_id=peer_id))


async def remove_from_connection_set(db: AsyncSession, user_id: str, peer_id: str) -> None:
    await db.execute(
        delete(UserConnection).where(
            UserConnection.user_id == user_id,
            UserConnection.peer_id == peer_id
        )
    )


async def get_connection_ids(db: AsyncSession, user_id: str) -> List[str]:
    """Ids in a user's connection set"""
    result = await db.execute(
        select(UserConnection.peer_id)
        .where(UserConnection.user_id == str(user_id))
        .order_by(UserConnection.created_at)
    )
    return list(result.scalars().all())


async def send_connection_request(db: AsyncSession, requester: User, recipient_id: str) -> Connection:
    recipient = await get_user_by_id(db, recipient_id)
    if not recipient:
        raise NotFoundError("User not found", USER_NOT_FOUND)

    if recipient.id == requester.id:
        raise InvalidOperationError("Cannot send connection request to yourself", CONNECTION_SELF_REQUEST)

    if await find_connection_between(db, requester.id, recipient.id):
        raise ConflictError(
            "Connection request already sent or connection already exists",
            CONNECTION_ALREADY_EXISTS
        )

    requester_id, recipient_id = requester.id, recipient.id
    conn = Connection(
        requester_id=requester_id,
        recipient_id=recipient_id,
        status=ConnectionStatus.PENDING.value,
        pair_key=make_pair_key(requester_id, recipient_id),
    )
    try:
        async with transaction(db, "Failed to send connection request"):
            db.add(conn)
            await record_event(db, ConnectionRequested(
                actor_id=requester.id,
                actor_name=requester.name,
                connection_id=conn.id,
                recipient_id=recipient_id,
            ))
    except IntegrityError:
        # A concurrent request for the same pair won the unique pair_key
        logger.warning(f"Duplicate connection request {requester_id} -> {recipient_id} rejected by store")
        raise ConflictError(
            "Connection request already sent or connection already exists",
            CONNECTION_ALREADY_EXISTS
        )

    logger.info(f"Connection {conn.id} requested: {requester_id} -> {recipient_id}")
    return await get_connection(db, conn.id)


async def _get_connection_for_recipient(db: AsyncSession, connection_id: str, caller: User, action: str) -> Connection:
    conn = await get_connection(db, connection_id)
    if not conn:
        raise NotFoundError("Connection request not found", CONNECTION_NOT_FOUND)
    if conn.recipient_id != caller.id:
        raise UnauthorizedError(f"Not authorized to {action} this connection request", CONNECTION_PERMISSION_DENIED)
    if conn.status != ConnectionStatus.PENDING.value:
        raise InvalidOperationError("Connection request is no longer pending", CONNECTION_NOT_PENDING)
    return conn


async def accept_connection(db: AsyncSession, caller: User, connection_id: str) -> Connection:
    """
    Accept a pending request addressed to the caller.

    The status change, both connection-set entries and the requester's
    notification are committed together.
    """
    conn = await _get_connection_for_recipient(db, connection_id, caller, "accept")
    conn_id, caller_id = conn.id, caller.id

    try:
        async with transaction(db, "Failed to accept connection request"):
            conn.status = ConnectionStatus.ACCEPTED.value
            db.add(conn)
            await add_to_connection_set(db, conn.requester_id, conn.recipient_id)
            await add_to_connection_set(db, conn.recipient_id, conn.requester_id)
            await record_event(db, ConnectionAccepted(
                actor_id=caller_id,
                actor_name=caller.name,
                connection_id=conn_id,
                requester_id=conn.requester_id,
            ))
    except IntegrityError:
        # A concurrent accept already wrote the connection-set rows
        conn = await get_connection(db, conn_id)
        if not conn:
            raise NotFoundError("Connection request not found", CONNECTION_NOT_FOUND)
        if conn.status != ConnectionStatus.ACCEPTED.value:
            raise InvalidOperationError("Connection request is no longer pending", CONNECTION_NOT_PENDING)
        logger.warning(f"Connection {conn_id} was accepted concurrently")
        return conn

    logger.info(f"Connection {conn_id} accepted by {caller_id}")
    return conn


async def reject_connection(db: AsyncSession, caller: User, connection_id: str) -> None:
    conn = await _get_connection_for_recipient(db, connection_id, caller, "reject")

    async with transaction(db, "Failed to reject connection request"):
        await db.delete(conn)

    logger.info(f"Connection {connection_id} rejected by {caller.id}")


async def remove_connection(db: AsyncSession, caller: User, connection_id: str) -> None:
    """
    Delete a connection (or withdraw a pending request) as either party.

    The record and both connection-set entries go in one transaction, so the
    graph stays symmetric when any step fails.
    """
    conn = await get_connection(db, connection_id)
    if not conn:
        raise NotFoundError("Connection not found", CONNECTION_NOT_FOUND)
    if not conn.involves(caller.id):
        raise UnauthorizedError("Not authorized to remove this connection", CONNECTION_PERMISSION_DENIED)

    async with transaction(db, "Failed to remove connection"):
        await db.delete(conn)
        await remove_from_connection_set(db, conn.requester_id, conn.recipient_id)
        await remove_from_connection_set(db, conn.recipient_id, conn.requester_id)

    logger.info(f"Connection {connection_id} removed by {caller.id}")


async def get_my_requests(db: AsyncSession, user_id: str) -> List[Connection]:
    """Pending requests addressed to the user"""
    result = await db.execute(
        select(Connection)
        .options(*_with_parties())
        .where(
            Connection.recipient_id == str(user_id),
            Connection.status == ConnectionStatus.PENDING.value
        )
        .order_by(Connection.created_at.desc())
    )
    return result.scalars().all()


async def get_pending_sent_requests(db: AsyncSession, user_id: str) -> List[Connection]:
    """Pending requests the user has sent"""
    result = await db.execute(
        select(Connection)
        .options(*_with_parties())
        .where(
            Connection.requester_id == str(user_id),
            Connection.status == ConnectionStatus.PENDING.value
        )
        .order_by(Connection.created_at.desc())
    )
    return result.scalars().all()


async def get_my_connections(db: AsyncSession, user_id: str) -> List[Connection]:
    result = await db.execute(
        select(Connection)
        .options(*_with_parties())
        .where(
            or_(
                Connection.requester_id == str(user_id),
                Connection.recipient_id == str(user_id)
            ),
            Connection.status == ConnectionStatus.ACCEPTED.value
        )
    )
    return result.scalars().all()
