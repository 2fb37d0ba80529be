from datetime import datetime
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, String
from proconnect.models.user import generate_uuid

if TYPE_CHECKING:
    from proconnect.models.user import User


class Notification(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)

    recipient_id: str = Field(foreign_key="user.id", index=True)
    sender_id: str = Field(foreign_key="user.id")

    # NotificationType value
    type: str = Field(sa_column=Column(String, nullable=False, index=True))
    content: str
    read: bool = Field(default=False)

    # Id of the Connection or Message the notification is about
    related_id: Optional[str] = Field(default=None)
    related_model: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    recipient: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Notification.recipient_id]"})
    sender: Optional["User"] = Relationship(sa_relationship_kwargs={"foreign_keys": "[Notification.sender_id]"})
