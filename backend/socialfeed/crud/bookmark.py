from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, col, select

from socialfeed.models.entry import Bookmark, EntryCreate


def get_bookmark(
    *,
    session: Session,
    user_id: UUID,
    entry_guid: str,
) -> Bookmark | None:
    statement = select(Bookmark).where(
        Bookmark.user_id == user_id,
        Bookmark.entry_guid == entry_guid,
    )
    return session.exec(statement).first()


def create_bookmark(
    *,
    session: Session,
    user_id: UUID,
    entry: EntryCreate,
    bookmarked_at: datetime,
) -> Bookmark:
    """
    Bookmark an entry for a user.

    Raises:
        IntegrityError: If the user already bookmarked the entry.
    """
    bookmark = Bookmark.model_validate(
        entry, update={"user_id": user_id, "bookmarked_at": bookmarked_at}
    )
    session.add(bookmark)
    session.flush()
    return bookmark


def delete_bookmark(*, session: Session, bookmark: Bookmark) -> None:
    session.delete(bookmark)
    session.flush()


def get_user_bookmarks(
    *,
    session: Session,
    user_id: UUID,
    limit: int,
    offset: int,
) -> list[Bookmark]:
    statement = (
        select(Bookmark)
        .where(Bookmark.user_id == user_id)
        .order_by(col(Bookmark.bookmarked_at).desc())
        .offset(offset)
        .limit(limit)
    )
    return list(session.exec(statement).all())


def count_user_bookmarks(*, session: Session, user_id: UUID) -> int:
    statement = select(func.count(col(Bookmark.id))).where(Bookmark.user_id == user_id)
    return int(session.exec(statement).one())


def get_bookmarked_entry_guids(
    *,
    session: Session,
    user_id: UUID,
    entry_guids: list[str],
) -> set[str]:
    if not entry_guids:
        return set()
    statement = select(Bookmark.entry_guid).where(
        Bookmark.user_id == user_id,
        col(Bookmark.entry_guid).in_(entry_guids),
    )
    return set(session.exec(statement).all())
