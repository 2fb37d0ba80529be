from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, String
from proconnect.models.user import generate_uuid
from proconnect.schemas.enums import ConnectionStatus

if TYPE_CHECKING:
    from proconnect.models.user import User


def make_pair_key(user_a: str, user_b: str) -> str:
    """Canonical key for an unordered pair of users."""
    first, second = sorted((str(user_a), str(user_b)))
    return f"{first}:{second}"


class Connection(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    requester_id: str = Field(foreign_key="user.id", index=True)
    recipient_id: str = Field(foreign_key="user.id", index=True)

    # Store status as VARCHAR, not Enum
    status: str = Field(
        sa_column=Column(String, nullable=False, default=ConnectionStatus.PENDING.value)
    )

    # One row per unordered pair, whatever the direction of the request
    pair_key: str = Field(index=True, unique=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    requester: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Connection.requester_id]"})
    recipient: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Connection.recipient_id]"})

    def involves(self, user_id: str) -> bool:
        return user_id in (self.requester_id, self.recipient_id)

    def other_party(self, user_id: str) -> str:
        return self.recipient_id if user_id == self.requester_id else self.requester_id
