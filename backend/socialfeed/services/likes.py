from datetime import datetime
from uuid import UUID

from psycopg.errors import UniqueViolation
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from socialfeed.converters import entry as entry_converters
from socialfeed.core.rate_limits import LIKES_TIERS
from socialfeed.crud import like as likes_crud
from socialfeed.exceptions.base import AlreadyExists, AppError
from socialfeed.models.entry import EntryCreate
from socialfeed.schemas.entry import LikeResult, LikeStatus, UserLikesPage
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive


def like(
    *,
    session: Session,
    user_id: UUID,
    entry: EntryCreate,
    now: datetime | None = None,
) -> LikeResult:
    """
    Like a feed entry. Liking an entry twice returns the existing like
    without consuming a token.

    Raises:
        RateLimitExceeded: If a likes burst/hourly/daily limit is reached.
        AlreadyExists: If a concurrent like of the same entry won the race.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        existing = likes_crud.get_like(
            session=session, user_id=user_id, entry_guid=entry.entry_guid
        )
        if existing is not None:
            return LikeResult(like_id=existing.id)

        rate_limiter.enforce(
            session=session, key=str(user_id), names=LIKES_TIERS, now=now
        )
        created = likes_crud.create_like(
            session=session, user_id=user_id, entry=entry, liked_at=now
        )
        like_id = created.id
        session.commit()
    except AppError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        if isinstance(e.orig, UniqueViolation):
            raise AlreadyExists("You already liked this entry.") from e
        raise AppError from e
    except Exception as e:
        session.rollback()
        raise AppError from e
    return LikeResult(like_id=like_id)


def unlike(*, session: Session, user_id: UUID, entry_guid: str) -> LikeResult:
    try:
        existing = likes_crud.get_like(
            session=session, user_id=user_id, entry_guid=entry_guid
        )
        if existing is None:
            return LikeResult(like_id=None)
        like_id = existing.id
        likes_crud.delete_like(session=session, like=existing)
        session.commit()
    except Exception as e:
        session.rollback()
        raise AppError from e
    return LikeResult(like_id=like_id)


def is_liked(*, session: Session, user_id: UUID | None, entry_guid: str) -> bool:
    if user_id is None:
        return False
    return (
        likes_crud.get_like(session=session, user_id=user_id, entry_guid=entry_guid)
        is not None
    )


def get_like_count(*, session: Session, entry_guid: str) -> int:
    return likes_crud.count_likes(session=session, entry_guid=entry_guid)


def get_like_status(
    *,
    session: Session,
    user_id: UUID | None,
    entry_guid: str,
) -> LikeStatus:
    return LikeStatus(
        is_liked=is_liked(session=session, user_id=user_id, entry_guid=entry_guid),
        count=get_like_count(session=session, entry_guid=entry_guid),
    )


def get_user_likes(
    *,
    session: Session,
    user_id: UUID,
    limit: int = 30,
    offset: int = 0,
) -> UserLikesPage:
    """
    A page of the entries a user liked, newest first, with the total count.
    """
    likes = likes_crud.get_user_likes(
        session=session, user_id=user_id, limit=limit, offset=offset
    )
    total_count = likes_crud.count_user_likes(session=session, user_id=user_id)
    return UserLikesPage(
        likes=[entry_converters.like_to_public(row) for row in likes],
        total_count=total_count,
        has_more=offset + limit < total_count,
    )
