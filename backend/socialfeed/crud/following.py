from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, col, select

from socialfeed.models.following import Following


def get_following(
    *,
    session: Session,
    user_id: UUID,
    post_id: str,
) -> Following | None:
    statement = select(Following).where(
        Following.user_id == user_id,
        Following.post_id == post_id,
    )
    return session.exec(statement).first()


def get_latest_following(*, session: Session, user_id: UUID) -> Following | None:
    """
    Get the most recently written following row of a user.

    Parameters:
        session (Session): The database session.
        user_id (UUID): The ID of the user.
    Returns:
        Following | None: The newest row by ``followed_at``, or None.
    """
    statement = (
        select(Following)
        .where(Following.user_id == user_id)
        .order_by(col(Following.followed_at).desc())
        .limit(1)
    )
    return session.exec(statement).first()


def count_followings_since(
    *,
    session: Session,
    user_id: UUID,
    since: datetime,
) -> tuple[int, datetime | None]:
    """
    Count the following rows a user wrote after ``since``.

    Returns:
        tuple[int, datetime | None]: The count and the oldest ``followed_at`` in range.
    """
    statement = select(
        func.count(col(Following.id)), func.min(col(Following.followed_at))
    ).where(
        Following.user_id == user_id,
        col(Following.followed_at) > since,
    )
    count, oldest = session.exec(statement).one()
    return int(count or 0), oldest


def create_following(
    *,
    session: Session,
    user_id: UUID,
    post_id: str,
    feed_url: str,
    followed_at: datetime,
) -> Following:
    """
    Create a following row.

    Raises:
        IntegrityError: If the user already follows the post.
    """
    following = Following(
        user_id=user_id,
        post_id=post_id,
        feed_url=feed_url,
        followed_at=followed_at,
    )
    session.add(following)
    session.flush()
    return following


def delete_following(*, session: Session, following: Following) -> None:
    session.delete(following)
    session.flush()


def has_following_for_feed(
    *,
    session: Session,
    user_id: UUID,
    feed_url: str,
) -> bool:
    statement = select(Following.id).where(
        Following.user_id == user_id,
        Following.feed_url == feed_url,
    )
    return session.exec(statement).first() is not None


def get_followed_post_ids(
    *,
    session: Session,
    user_id: UUID,
    post_ids: list[str],
) -> set[str]:
    """
    Return the subset of ``post_ids`` the user follows.
    """
    if not post_ids:
        return set()
    statement = select(Following.post_id).where(
        Following.user_id == user_id,
        col(Following.post_id).in_(post_ids),
    )
    return set(session.exec(statement).all())


def count_followers(*, session: Session, post_id: str) -> int:
    statement = select(func.count(col(Following.id))).where(
        Following.post_id == post_id
    )
    return int(session.exec(statement).one())
