from datetime import datetime
from uuid import UUID

from sqlmodel import SQLModel

from socialfeed.core.enums import (
    FriendshipDirection,
    FriendshipStatus,
    NotificationType,
    RelationStatus,
)

from .user import UserDisplay

__all__ = [
    "FriendshipPublic",
    "FriendshipStatusPublic",
    "BatchFriendshipStatus",
    "FriendshipDeleted",
    "FriendPublic",
    "FriendNotification",
]


class FriendshipPublic(SQLModel):
    id: UUID
    requester_id: UUID
    requestee_id: UUID
    status: FriendshipStatus
    created_at: datetime
    updated_at: datetime


class FriendshipStatusPublic(SQLModel):
    exists: bool
    # "pending", "accepted", "self" or None when no row exists
    status: str | None = None
    direction: FriendshipDirection | None = None
    friendship_id: UUID | None = None


class BatchFriendshipStatus(SQLModel):
    user_id: UUID
    status: RelationStatus
    direction: FriendshipDirection | None = None
    friendship_id: UUID | None = None


class FriendshipDeleted(SQLModel):
    action: str = "deleted"
    friendship_id: UUID


class FriendPublic(SQLModel):
    friendship: FriendshipPublic
    direction: FriendshipDirection
    user: UserDisplay


class FriendNotification(SQLModel):
    type: NotificationType
    friendship_id: UUID
    direction: FriendshipDirection
    status: FriendshipStatus
    created_at: datetime
    user: UserDisplay
