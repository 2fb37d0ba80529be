from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field, Relationship
from proconnect.models.user import generate_uuid
from proconnect.models.post_comment import PostComment

if TYPE_CHECKING:
    from proconnect.models.user import User


class PostLike(SQLModel, table=True):
    """Join table: the set of users who like a post"""

    post_id: str = Field(foreign_key="post.id", primary_key=True)
    user_id: str = Field(foreign_key="user.id", primary_key=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Post(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    author_id: str = Field(foreign_key="user.id", index=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    image: str = Field(default="")  # opaque path handed out by the asset store

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"onupdate": datetime.utcnow}
    )

    author: Optional["User"] = Relationship(back_populates="posts")

    liked_by: List["User"] = Relationship(
        link_model=PostLike,
        sa_relationship_kwargs={"viewonly": True}
    )

    comments: List[PostComment] = Relationship(
        back_populates="post",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
