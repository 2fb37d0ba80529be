from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from proconnect.schemas.enums import NotificationType, RelatedModel
from proconnect.schemas.user import UserBrief


class NotificationRead(BaseModel):
    id: str
    recipient_id: str
    sender_id: str
    type: NotificationType
    content: str
    read: bool
    related_id: Optional[str] = None
    related_model: Optional[RelatedModel] = None
    created_at: datetime

    sender: Optional[UserBrief] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class MarkAllReadResponse(BaseModel):
    updated: int
