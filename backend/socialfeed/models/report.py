from datetime import datetime
from uuid import UUID, uuid4

from pydantic import AnyHttpUrl, EmailStr
from sqlalchemy import Enum as SAEnum
from sqlmodel import Column, Field, SQLModel

from socialfeed.core.enums import ReportReason, SubmissionType
from socialfeed.utils import now_utc_naive

__all__ = [
    "ReportCreate",
    "Report",
    "SubmissionCreate",
    "Submission",
]


class ReportCreate(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(max_length=255)
    reason: ReportReason
    description: str = Field(min_length=1, max_length=2000)
    post_slug: str = Field(min_length=1, max_length=255)


class Report(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    reason: ReportReason = Field(
        sa_column=Column(SAEnum(ReportReason, native_enum=False), nullable=False)
    )
    description: str = Field(max_length=2000)
    post_slug: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=now_utc_naive)


class SubmissionCreate(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(max_length=255)
    type: SubmissionType
    publication_name: str = Field(min_length=1, max_length=100)
    rss_feed: AnyHttpUrl


class Submission(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    type: SubmissionType = Field(
        sa_column=Column(SAEnum(SubmissionType, native_enum=False), nullable=False)
    )
    publication_name: str = Field(max_length=100)
    rss_feed: str = Field(max_length=2048)
    created_at: datetime = Field(default_factory=now_utc_naive)
