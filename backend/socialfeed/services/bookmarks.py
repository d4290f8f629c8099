from datetime import datetime
from logging import getLogger
from uuid import UUID

from psycopg.errors import UniqueViolation
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from socialfeed.converters import entry as entry_converters
from socialfeed.core.enums import BookmarkAction
from socialfeed.core.rate_limits import BOOKMARKS_TIERS
from socialfeed.crud import bookmark as bookmarks_crud
from socialfeed.exceptions.base import AlreadyExists, AppError
from socialfeed.models.entry import EntryCreate
from socialfeed.schemas.entry import (
    BookmarkRemoved,
    BookmarkResult,
    BookmarkStatus,
    UserBookmarksPage,
)
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive

logger = getLogger(__name__)


def bookmark(
    *,
    session: Session,
    user_id: UUID,
    entry: EntryCreate,
    now: datetime | None = None,
) -> BookmarkResult:
    """
    Toggle a bookmark: remove it if the user already bookmarked the entry,
    otherwise create it. Both directions count against the bookmark limits,
    which are checked before the existing bookmark is looked up.

    Returns:
        BookmarkResult: The action taken and the id of the affected bookmark.
    Raises:
        RateLimitExceeded: If a bookmarks burst/hourly/daily limit is reached.
        AlreadyExists: If a concurrent bookmark of the same entry won the race.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        rate_limiter.enforce(
            session=session, key=str(user_id), names=BOOKMARKS_TIERS, now=now
        )
        existing = bookmarks_crud.get_bookmark(
            session=session, user_id=user_id, entry_guid=entry.entry_guid
        )
        if existing is not None:
            bookmark_id = existing.id
            bookmarks_crud.delete_bookmark(session=session, bookmark=existing)
            action = BookmarkAction.UNBOOKMARKED
        else:
            created = bookmarks_crud.create_bookmark(
                session=session, user_id=user_id, entry=entry, bookmarked_at=now
            )
            bookmark_id = created.id
            action = BookmarkAction.BOOKMARKED
        session.commit()
    except AppError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        if isinstance(e.orig, UniqueViolation):
            raise AlreadyExists("You already bookmarked this entry.") from e
        raise AppError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("User %s %s entry %s", user_id, action.value, entry.entry_guid)
    return BookmarkResult(action=action, bookmark_id=bookmark_id)


def remove_bookmark(
    *, session: Session, user_id: UUID, entry_guid: str
) -> BookmarkRemoved:
    """
    Remove a bookmark if it exists. Not rate limited, and removing a missing
    bookmark is not an error.
    """
    try:
        existing = bookmarks_crud.get_bookmark(
            session=session, user_id=user_id, entry_guid=entry_guid
        )
        if existing is None:
            return BookmarkRemoved(bookmark_id=None)
        bookmark_id = existing.id
        bookmarks_crud.delete_bookmark(session=session, bookmark=existing)
        session.commit()
    except Exception as e:
        session.rollback()
        raise AppError from e
    return BookmarkRemoved(bookmark_id=bookmark_id)


def get_bookmark_status(
    *,
    session: Session,
    user_id: UUID | None,
    entry_guid: str,
) -> BookmarkStatus:
    if user_id is None:
        return BookmarkStatus(is_bookmarked=False)
    existing = bookmarks_crud.get_bookmark(
        session=session, user_id=user_id, entry_guid=entry_guid
    )
    return BookmarkStatus(is_bookmarked=existing is not None)


def batch_get_bookmark_statuses(
    *,
    session: Session,
    user_id: UUID | None,
    entry_guids: list[str],
) -> dict[str, BookmarkStatus]:
    bookmarked = (
        bookmarks_crud.get_bookmarked_entry_guids(
            session=session, user_id=user_id, entry_guids=entry_guids
        )
        if user_id is not None
        else set()
    )
    return {
        guid: BookmarkStatus(is_bookmarked=guid in bookmarked) for guid in entry_guids
    }


def get_user_bookmarks(
    *,
    session: Session,
    user_id: UUID,
    limit: int = 30,
    offset: int = 0,
) -> UserBookmarksPage:
    """
    A page of the user's bookmarks, most recently bookmarked first.
    """
    bookmarks = bookmarks_crud.get_user_bookmarks(
        session=session, user_id=user_id, limit=limit, offset=offset
    )
    total_count = bookmarks_crud.count_user_bookmarks(session=session, user_id=user_id)
    return UserBookmarksPage(
        bookmarks=[entry_converters.bookmark_to_public(b) for b in bookmarks],
        total_count=total_count,
        has_more=offset + limit < total_count,
    )
