from typing import Iterable, List
from proconnect.models.connection import Connection
from proconnect.models.user import User
from proconnect.schemas.connection import ConnectionRead
from proconnect.schemas.user import UserBrief, UserPublic


def brief_user(user: User) -> UserBrief:
    return UserBrief(
        id=str(user.id),
        name=user.name,
        email=user.email,
        avatar=user.avatar or "",
    )


def format_connection(conn: Connection) -> ConnectionRead:
    return ConnectionRead(
        id=str(conn.id),
        requester_id=str(conn.requester_id),
        recipient_id=str(conn.recipient_id),
        status=conn.status,
        created_at=conn.created_at,
        requester=brief_user(conn.requester),
        recipient=brief_user(conn.recipient)
    )


def format_profile(user: User, connection_ids: Iterable[str]) -> UserPublic:
    return UserPublic(
        id=str(user.id),
        name=user.name,
        email=user.email,
        bio=user.bio or "",
        avatar=user.avatar or "",
        skills=user.skills or [],
        experience=user.experience or [],
        connections=list(connection_ids),
        created_at=user.created_at,
    )


def format_profiles(users: Iterable[User]) -> List[UserBrief]:
    return [brief_user(u) for u in users]
