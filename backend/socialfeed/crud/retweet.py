from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, col, select

from socialfeed.models.entry import EntryCreate, Retweet


def get_retweet(
    *,
    session: Session,
    user_id: UUID,
    entry_guid: str,
) -> Retweet | None:
    statement = select(Retweet).where(
        Retweet.user_id == user_id,
        Retweet.entry_guid == entry_guid,
    )
    return session.exec(statement).first()


def create_retweet(
    *,
    session: Session,
    user_id: UUID,
    entry: EntryCreate,
    retweeted_at: datetime,
) -> Retweet:
    """
    Create a retweet of an entry.

    Raises:
        IntegrityError: If the user already retweeted the entry.
    """
    retweet = Retweet.model_validate(
        entry, update={"user_id": user_id, "retweeted_at": retweeted_at}
    )
    session.add(retweet)
    session.flush()
    return retweet


def delete_retweet(*, session: Session, retweet: Retweet) -> None:
    session.delete(retweet)
    session.flush()


def count_retweets(*, session: Session, entry_guid: str) -> int:
    statement = select(func.count(col(Retweet.id))).where(
        Retweet.entry_guid == entry_guid
    )
    return int(session.exec(statement).one())


def get_retweeters_for_entries(
    *,
    session: Session,
    entry_guids: list[str],
) -> list[tuple[str, UUID]]:
    """
    Get (entry_guid, user_id) pairs for every retweet of the given entries.
    """
    if not entry_guids:
        return []
    statement = select(Retweet.entry_guid, Retweet.user_id).where(
        col(Retweet.entry_guid).in_(entry_guids)
    )
    return [(entry_guid, user_id) for entry_guid, user_id in session.exec(statement)]


def get_user_retweets(*, session: Session, user_id: UUID, limit: int) -> list[Retweet]:
    statement = (
        select(Retweet)
        .where(Retweet.user_id == user_id)
        .order_by(col(Retweet.retweeted_at).desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())
