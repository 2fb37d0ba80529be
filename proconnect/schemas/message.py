from datetime import datetime
from pydantic import BaseModel, Field
from proconnect.schemas.user import UserBrief


class MessageCreate(BaseModel):
    recipient_id: str
    content: str = Field(..., min_length=1)


class MessageRead(BaseModel):
    id: str
    sender_id: str
    recipient_id: str
    content: str
    read: bool
    created_at: datetime
    sender: UserBrief
    recipient: UserBrief

    class Config:
        from_attributes = True


class UnreadCount(BaseModel):
    count: int
