import uuid
from datetime import datetime

from pydantic import EmailStr
from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel

from socialfeed.utils import now_utc_naive

__all__ = [
    "UserBase",
    "UserCreate",
    "UserRegister",
    "UserUpdateMe",
    "User",
]


# Shared properties
class UserBase(SQLModel):
    username: str = Field(unique=True, index=True, min_length=1, max_length=64)
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    is_active: bool = Field(default=True)
    name: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=500)
    profile_image: str | None = Field(default=None, max_length=2048)
    profile_image_key: str | None = Field(default=None, max_length=255)


# Properties to receive via API on creation
class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=255)


class UserRegister(SQLModel):
    username: str = Field(min_length=1, max_length=64)
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=255)
    name: str | None = Field(default=None, max_length=255)


# Profile edits, all fields optional
class UserUpdateMe(SQLModel):
    name: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=500)
    profile_image: str | None = Field(default=None, max_length=2048)
    profile_image_key: str | None = Field(default=None, max_length=255)


# Database model, database table inferred from class name
class User(UserBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hashed_password: str
    rss_keys: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime = Field(default_factory=now_utc_naive)
