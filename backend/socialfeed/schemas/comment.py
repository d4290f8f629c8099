from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from .user import UserDisplay

__all__ = [
    "CommentCreate",
    "CommentPublic",
    "CommentCreated",
    "CommentDeleted",
    "CommentLikeStatus",
    "CommentLikeStatusWithId",
]


class CommentCreate(SQLModel):
    entry_guid: str = Field(min_length=1, max_length=2048)
    feed_url: str = Field(max_length=2048)
    # Length is checked after trimming in the service
    content: str
    parent_id: UUID | None = None


class CommentPublic(SQLModel):
    id: UUID
    user_id: UUID
    username: str
    entry_guid: str
    feed_url: str
    content: str
    created_at: datetime
    parent_id: UUID | None
    like_count: int
    user: UserDisplay | None = None


class CommentCreated(SQLModel):
    action: str = "created"
    comment_id: UUID


class CommentDeleted(SQLModel):
    success: bool = True
    deleted: int


class CommentLikeStatus(SQLModel):
    is_liked: bool
    count: int


class CommentLikeStatusWithId(CommentLikeStatus):
    comment_id: UUID
