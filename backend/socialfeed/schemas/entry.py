from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel

from socialfeed.core.enums import BookmarkAction, RetweetAction

__all__ = [
    "RetweetResult",
    "UnretweetResult",
    "RetweetStatus",
    "RetweetPublic",
    "LikeResult",
    "LikeStatus",
    "LikePublic",
    "UserLikesPage",
    "BookmarkResult",
    "BookmarkRemoved",
    "BookmarkStatus",
    "BookmarkPublic",
    "UserBookmarksPage",
]


class RetweetResult(SQLModel):
    action: RetweetAction
    retweet_id: UUID


class UnretweetResult(SQLModel):
    success: bool = True
    not_found: bool = False


class RetweetStatus(SQLModel):
    is_retweeted: bool
    count: int


class RetweetPublic(SQLModel):
    id: UUID
    user_id: UUID
    entry_guid: str
    feed_url: str
    title: str
    pub_date: str
    link: str
    retweeted_at: datetime


class LikeResult(SQLModel):
    like_id: UUID | None


class LikeStatus(SQLModel):
    is_liked: bool
    count: int


class LikePublic(SQLModel):
    id: UUID
    entry_guid: str
    feed_url: str
    title: str
    pub_date: str
    link: str
    liked_at: datetime


class UserLikesPage(SQLModel):
    likes: list[LikePublic]
    total_count: int
    has_more: bool


class BookmarkResult(SQLModel):
    action: BookmarkAction
    bookmark_id: UUID


class BookmarkRemoved(SQLModel):
    # None when there was nothing to remove
    bookmark_id: UUID | None


class BookmarkStatus(SQLModel):
    is_bookmarked: bool


class BookmarkPublic(SQLModel):
    id: UUID
    entry_guid: str
    feed_url: str
    title: str
    pub_date: str
    link: str
    bookmarked_at: datetime


class UserBookmarksPage(SQLModel):
    bookmarks: list[BookmarkPublic]
    total_count: int
    has_more: bool
