from sqlmodel import Field, SQLModel

from socialfeed.core.enums import FollowAction

__all__ = [
    "FollowCreate",
    "FollowResult",
    "UnfollowResult",
]


class FollowCreate(SQLModel):
    feed_url: str = Field(min_length=1, max_length=2048)
    rss_key: str = Field(min_length=1, max_length=255)


class FollowResult(SQLModel):
    success: bool
    feed_url: str
    action: FollowAction


class UnfollowResult(SQLModel):
    success: bool
    action: FollowAction | None = None
    error: str | None = None
