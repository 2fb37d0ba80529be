from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from proconnect.db.database import get_db
from proconnect.models.user import User
from proconnect.schemas.connection import ConnectionCreate, ConnectionRead
from proconnect.core.security import get_current_active_user
from proconnect.crud import connection as conn_crud
from proconnect.utils.connection_helpers import format_connection

router = APIRouter(prefix="/connections", tags=["Connections"])


@router.post("/request", response_model=ConnectionRead, status_code=status.HTTP_201_CREATED)
async def send_request(
    request_in: ConnectionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    conn = await conn_crud.send_connection_request(db, current_user, request_in.recipient_id)
    return format_connection(conn)


@router.get("/requests", response_model=List[ConnectionRead])
async def get_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Pending requests addressed to the current user"""
    return [format_connection(c) for c in await conn_crud.get_my_requests(db, current_user.id)]


@router.get("/sent", response_model=List[ConnectionRead])
async def get_sent_requests(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return [format_connection(c) for c in await conn_crud.get_pending_sent_requests(db, current_user.id)]


@router.put("/accept/{connection_id}", response_model=ConnectionRead)
async def accept_request(
    connection_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    conn = await conn_crud.accept_connection(db, current_user, connection_id)
    return format_connection(conn)


@router.put("/reject/{connection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def reject_request(
    connection_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await conn_crud.reject_connection(db, current_user, connection_id)


@router.get("", response_model=List[ConnectionRead])
async def get_connections(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """Accepted connections of the current user"""
    return [format_connection(c) for c in await conn_crud.get_my_connections(db, current_user.id)]


@router.delete("/{connection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_connection(
    connection_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    await conn_crud.remove_connection(db, current_user, connection_id)
