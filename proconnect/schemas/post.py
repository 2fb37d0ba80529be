from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field
from proconnect.schemas.user import UserBrief


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    image: Optional[str] = Field(None, description="Path returned by the upload service")


class PostUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1, max_length=5000)


class PostRead(BaseModel):
    id: str
    author_id: str
    content: str
    image: str = ""
    created_at: datetime
    updated_at: datetime
    author: Optional[UserBrief] = None
    likes: List[str] = Field(default_factory=list, description="Ids of users who like the post")
    comments: List[str] = Field(default_factory=list, description="Ids of the post's comments")


class PostLikes(BaseModel):
    id: str
    likes: List[str]
