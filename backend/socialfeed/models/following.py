from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from socialfeed.utils import now_utc_naive

__all__ = [
    "Following",
]


class Following(SQLModel, table=True):
    """A user following the feed behind a post."""

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_following_user_post"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    post_id: str = Field(max_length=255, index=True)
    feed_url: str = Field(max_length=2048, index=True)
    followed_at: datetime = Field(default_factory=now_utc_naive, index=True)
