from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from socialfeed.utils import now_utc_naive

__all__ = [
    "EntryBase",
    "EntryCreate",
    "Retweet",
    "Like",
    "Bookmark",
]


# Feed entry fields copied onto retweets, likes and bookmarks
class EntryBase(SQLModel):
    entry_guid: str = Field(min_length=1, max_length=2048, index=True)
    feed_url: str = Field(max_length=2048)
    title: str = Field(max_length=1024)
    pub_date: str = Field(max_length=64)
    link: str = Field(max_length=2048)


class EntryCreate(EntryBase):
    pass


class Retweet(EntryBase, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "entry_guid", name="uq_retweet_user_entry"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    retweeted_at: datetime = Field(default_factory=now_utc_naive, index=True)


class Like(EntryBase, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "entry_guid", name="uq_like_user_entry"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    liked_at: datetime = Field(default_factory=now_utc_naive, index=True)


class Bookmark(EntryBase, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "entry_guid", name="uq_bookmark_user_entry"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    bookmarked_at: datetime = Field(default_factory=now_utc_naive, index=True)
