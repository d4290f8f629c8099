from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, col, select

from socialfeed.models.entry import EntryCreate, Like


def get_like(*, session: Session, user_id: UUID, entry_guid: str) -> Like | None:
    statement = select(Like).where(
        Like.user_id == user_id,
        Like.entry_guid == entry_guid,
    )
    return session.exec(statement).first()


def create_like(
    *,
    session: Session,
    user_id: UUID,
    entry: EntryCreate,
    liked_at: datetime,
) -> Like:
    like = Like.model_validate(entry, update={"user_id": user_id, "liked_at": liked_at})
    session.add(like)
    session.flush()
    return like


def delete_like(*, session: Session, like: Like) -> None:
    session.delete(like)
    session.flush()


def count_likes(*, session: Session, entry_guid: str) -> int:
    statement = select(func.count(col(Like.id))).where(Like.entry_guid == entry_guid)
    return int(session.exec(statement).one())


def get_user_likes(
    *,
    session: Session,
    user_id: UUID,
    limit: int,
    offset: int,
) -> list[Like]:
    statement = (
        select(Like)
        .where(Like.user_id == user_id)
        .order_by(col(Like.liked_at).desc())
        .offset(offset)
        .limit(limit)
    )
    return list(session.exec(statement).all())


def count_user_likes(*, session: Session, user_id: UUID) -> int:
    statement = select(func.count(col(Like.id))).where(Like.user_id == user_id)
    return int(session.exec(statement).one())
