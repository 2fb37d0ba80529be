from datetime import datetime
from pydantic import BaseModel
from proconnect.schemas.enums import ConnectionStatus
from proconnect.schemas.user import UserBrief


class ConnectionCreate(BaseModel):
    recipient_id: str


class ConnectionRead(BaseModel):
    id: str
    requester_id: str
    recipient_id: str
    status: ConnectionStatus
    created_at: datetime
    requester: UserBrief
    recipient: UserBrief

    class Config:
        from_attributes = True
        use_enum_values = True
