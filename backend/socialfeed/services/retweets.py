from datetime import datetime
from logging import getLogger
from uuid import UUID

from psycopg.errors import UniqueViolation
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from socialfeed.converters import entry as entry_converters
from socialfeed.core.enums import RetweetAction
from socialfeed.core.rate_limits import RETWEETS_TIERS
from socialfeed.crud import retweet as retweets_crud
from socialfeed.exceptions.base import AlreadyExists, AppError
from socialfeed.models.entry import EntryCreate
from socialfeed.schemas.entry import (
    RetweetPublic,
    RetweetResult,
    RetweetStatus,
    UnretweetResult,
)
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive

logger = getLogger(__name__)


def retweet(
    *,
    session: Session,
    user_id: UUID,
    entry: EntryCreate,
    now: datetime | None = None,
) -> RetweetResult:
    """
    Toggle a retweet: remove it if the user already retweeted the entry,
    otherwise create it. Only creating a retweet counts against the limits.

    Returns:
        RetweetResult: The action taken and the id of the affected retweet.
    Raises:
        RateLimitExceeded: If a retweets burst/hourly/daily limit is reached.
        AlreadyExists: If a concurrent retweet of the same entry won the race.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        existing = retweets_crud.get_retweet(
            session=session, user_id=user_id, entry_guid=entry.entry_guid
        )
        if existing is not None:
            retweet_id = existing.id
            retweets_crud.delete_retweet(session=session, retweet=existing)
            action = RetweetAction.UNRETWEETED
        else:
            rate_limiter.enforce(
                session=session, key=str(user_id), names=RETWEETS_TIERS, now=now
            )
            created = retweets_crud.create_retweet(
                session=session, user_id=user_id, entry=entry, retweeted_at=now
            )
            retweet_id = created.id
            action = RetweetAction.RETWEETED
        session.commit()
    except AppError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        if isinstance(e.orig, UniqueViolation):
            raise AlreadyExists("You already retweeted this entry.") from e
        raise AppError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("User %s %s entry %s", user_id, action.value, entry.entry_guid)
    return RetweetResult(action=action, retweet_id=retweet_id)


def unretweet(*, session: Session, user_id: UUID, entry_guid: str) -> UnretweetResult:
    """
    Remove a retweet if it exists. Removing a missing retweet is not an error.
    """
    try:
        existing = retweets_crud.get_retweet(
            session=session, user_id=user_id, entry_guid=entry_guid
        )
        if existing is None:
            return UnretweetResult(not_found=True)
        retweets_crud.delete_retweet(session=session, retweet=existing)
        session.commit()
    except Exception as e:
        session.rollback()
        raise AppError from e
    return UnretweetResult()


def get_retweet_status(
    *,
    session: Session,
    user_id: UUID | None,
    entry_guid: str,
) -> RetweetStatus:
    count = retweets_crud.count_retweets(session=session, entry_guid=entry_guid)
    is_retweeted = (
        user_id is not None
        and retweets_crud.get_retweet(
            session=session, user_id=user_id, entry_guid=entry_guid
        )
        is not None
    )
    return RetweetStatus(is_retweeted=is_retweeted, count=count)


def batch_get_retweet_counts(
    *,
    session: Session,
    user_id: UUID | None,
    entry_guids: list[str],
) -> dict[str, RetweetStatus]:
    """
    Retweet status for many entries from a single query.

    Returns:
        dict[str, RetweetStatus]: Status per requested guid, entries without
            retweets included with a zero count.
    """
    statuses = {
        guid: RetweetStatus(is_retweeted=False, count=0) for guid in entry_guids
    }
    for guid, retweeter_id in retweets_crud.get_retweeters_for_entries(
        session=session, entry_guids=list(statuses)
    ):
        status = statuses[guid]
        status.count += 1
        if retweeter_id == user_id:
            status.is_retweeted = True
    return statuses


def get_user_retweets(
    *,
    session: Session,
    user_id: UUID,
    limit: int = 50,
) -> list[RetweetPublic]:
    retweets = retweets_crud.get_user_retweets(
        session=session, user_id=user_id, limit=limit
    )
    return [entry_converters.retweet_to_public(r) for r in retweets]
