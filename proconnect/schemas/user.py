from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, EmailStr, SecretStr, Field, validator


class UserBrief(BaseModel):
    """Projection joined into connections, messages and notifications"""
    id: str
    name: str
    email: str
    avatar: str = ""

    class Config:
        from_attributes = True


class ExperienceEntry(BaseModel):
    title: str
    company: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    current: bool = False
    description: Optional[str] = None


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: SecretStr

    @validator("name")
    def strip_name(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v

    @validator("password")
    def validate_password(cls, v: SecretStr):
        if len(v.get_secret_value()) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[List[ExperienceEntry]] = None


class UserPublic(BaseModel):
    id: str
    name: str
    email: str
    bio: str = ""
    avatar: str = ""
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    connections: List[str] = Field(default_factory=list, description="Ids of connected users")
    created_at: datetime
