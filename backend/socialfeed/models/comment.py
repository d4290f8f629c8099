from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from socialfeed.utils import now_utc_naive

__all__ = [
    "Comment",
    "CommentLike",
]


class Comment(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    # Snapshot of the author's username at write time
    username: str = Field(max_length=64)
    entry_guid: str = Field(max_length=2048, index=True)
    feed_url: str = Field(max_length=2048)
    content: str = Field(max_length=500)
    created_at: datetime = Field(default_factory=now_utc_naive, index=True)
    parent_id: UUID | None = Field(default=None, foreign_key="comment.id", index=True)
    like_count: int = Field(default=0)


class CommentLike(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_commentlike_user_comment"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    comment_id: UUID = Field(foreign_key="comment.id", ondelete="CASCADE", index=True)
    liked_at: datetime = Field(default_factory=now_utc_naive)
