from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel

from socialfeed.models.user import UserBase

__all__ = [
    "UserPublic",
    "UserMePublic",
    "UserDisplay",
]


class UserPublic(UserBase):
    id: UUID
    created_at: datetime


class UserMePublic(UserPublic):
    rss_keys: list[str]


# Lightweight projection attached to comments and friend lists
class UserDisplay(SQLModel):
    user_id: UUID
    username: str
    name: str | None = None
    profile_image: str | None = None
