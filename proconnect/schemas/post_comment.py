from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from proconnect.schemas.user import UserBrief


class PostCommentCreate(BaseModel):
    post_id: str
    text: str = Field(..., min_length=1, max_length=1000)


class PostCommentRead(BaseModel):
    id: str
    post_id: str
    author_id: str
    text: str
    created_at: datetime
    author: Optional[UserBrief] = None

    class Config:
        from_attributes = True
