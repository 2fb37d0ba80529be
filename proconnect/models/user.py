import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING, Any, Dict

from sqlmodel import SQLModel, Field, Relationship, Column, JSON
from passlib.context import CryptContext

# Password hashing configuration
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

if TYPE_CHECKING:
    from proconnect.models.post import Post


def generate_uuid() -> str:
    return str(uuid.uuid4())


class UserConnection(SQLModel, table=True):
    """One entry of a user's connection set. Rows come in mirrored pairs."""

    user_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True
    )
    peer_id: str = Field(
        foreign_key="user.id",
        primary_key=True,
        index=True
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)


class User(SQLModel, table=True):
    id: str = Field(default_factory=generate_uuid, primary_key=True)
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., index=True, unique=True)
    hashed_password: str
    bio: str = Field(default="", max_length=500)
    avatar: str = Field(default="")  # opaque path handed out by the asset store
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    experience: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON),
        description="Work history entries (title, company, dates, description)"
    )
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    connections: List["User"] = Relationship(
        link_model=UserConnection,
        sa_relationship_kwargs={
            "primaryjoin": "User.id == UserConnection.user_id",
            "secondaryjoin": "User.id == UserConnection.peer_id",
            "viewonly": True
        }
    )

    posts: List["Post"] = Relationship(back_populates="author")

    def set_password(self, password: str) -> None:
        self.hashed_password = pwd_context.hash(password)

    def check_password(self, password: str) -> bool:
        return pwd_context.verify(password, self.hashed_password)
