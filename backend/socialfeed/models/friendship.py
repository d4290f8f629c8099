from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Enum as SAEnum
from sqlalchemy import UniqueConstraint
from sqlmodel import Column, Field, SQLModel

from socialfeed.core.enums import FriendshipStatus
from socialfeed.utils import now_utc_naive

__all__ = [
    "Friendship",
]


class Friendship(SQLModel, table=True):
    """
    A directed friend request. Once accepted it means friendship in both
    directions; at most one row exists per unordered pair of users.
    """

    __table_args__ = (
        UniqueConstraint(
            "requester_id", "requestee_id", name="uq_friendship_requester_requestee"
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    requester_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    requestee_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    status: FriendshipStatus = Field(
        default=FriendshipStatus.PENDING,
        sa_column=Column(SAEnum(FriendshipStatus, native_enum=False), nullable=False),
    )
    created_at: datetime = Field(default_factory=now_utc_naive)
    updated_at: datetime = Field(default_factory=now_utc_naive)
