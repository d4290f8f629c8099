from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

__all__ = [
    "RateLimiterState",
]


class RateLimiterState(SQLModel, table=True):
    """Token count for one (limiter, key) pair in its current fixed window."""

    __table_args__ = (
        UniqueConstraint("name", "key", name="uq_ratelimiterstate_name_key"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=64, index=True)
    key: str = Field(max_length=255)
    value: int
    window_start: datetime = Field(index=True)
