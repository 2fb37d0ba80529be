from datetime import datetime
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from proconnect.models.user import generate_uuid

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class PostComment(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    text: str = Field(..., max_length=1000)
    post_id: str = Field(foreign_key="post.id", index=True)
    author_id: str = Field(foreign_key="user.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    post: Optional["Post"] = Relationship(back_populates="comments")
    author: Optional["User"] = Relationship()
