from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, Text
from proconnect.models.user import generate_uuid

if TYPE_CHECKING:
    from proconnect.models.user import User


class Message(SQLModel, table=True):
    """A directed chat message. Only `read` ever changes after insert."""

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    sender_id: str = Field(foreign_key="user.id", index=True)
    recipient_id: str = Field(foreign_key="user.id", index=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    sender: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Message.sender_id]"})
    recipient: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Message.recipient_id]"})
