from datetime import datetime
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from socialfeed.core.enums import FriendshipStatus
from socialfeed.models.friendship import Friendship


def get_friendship_by_id(*, session: Session, friendship_id: UUID) -> Friendship | None:
    return session.get(Friendship, friendship_id)


def get_friendship(
    *,
    session: Session,
    requester_id: UUID,
    requestee_id: UUID,
) -> Friendship | None:
    """
    Get the friendship row sent from requester to requestee, in that direction only.

    Parameters:
        session (Session): The database session.
        requester_id (UUID): The ID of the user who sent the request.
        requestee_id (UUID): The ID of the user who received the request.
    Returns:
        Friendship | None: The row if it exists, otherwise None.
    """
    statement = select(Friendship).where(
        Friendship.requester_id == requester_id,
        Friendship.requestee_id == requestee_id,
    )
    return session.exec(statement).first()


def create_friend_request(
    *,
    session: Session,
    requester_id: UUID,
    requestee_id: UUID,
    now: datetime,
) -> Friendship:
    """
    Create a pending friend request from one user to another.

    Raises:
        IntegrityError: If a request already exists in this direction.
    """
    friendship = Friendship(
        requester_id=requester_id,
        requestee_id=requestee_id,
        status=FriendshipStatus.PENDING,
        created_at=now,
        updated_at=now,
    )
    session.add(friendship)
    session.flush()
    return friendship


def accept_friendship(
    *,
    session: Session,
    friendship: Friendship,
    now: datetime,
) -> Friendship:
    friendship.status = FriendshipStatus.ACCEPTED
    friendship.updated_at = now
    session.add(friendship)
    session.flush()
    return friendship


def delete_friendship(*, session: Session, friendship: Friendship) -> None:
    session.delete(friendship)
    session.flush()


def get_sent_friendships(
    *,
    session: Session,
    user_id: UUID,
    status: FriendshipStatus | None = None,
) -> list[Friendship]:
    statement = select(Friendship).where(Friendship.requester_id == user_id)
    if status is not None:
        statement = statement.where(Friendship.status == status)
    return list(session.exec(statement).all())


def get_received_friendships(
    *,
    session: Session,
    user_id: UUID,
    status: FriendshipStatus | None = None,
) -> list[Friendship]:
    statement = select(Friendship).where(Friendship.requestee_id == user_id)
    if status is not None:
        statement = statement.where(Friendship.status == status)
    return list(session.exec(statement).all())


def get_friendships_for_user(
    *,
    session: Session,
    user_id: UUID,
    status: FriendshipStatus | None = None,
    limit: int,
    offset: int,
) -> list[Friendship]:
    """
    Get friendships in either direction involving a user, newest first.
    """
    statement = select(Friendship).where(
        or_(
            col(Friendship.requester_id) == user_id,
            col(Friendship.requestee_id) == user_id,
        )
    )
    if status is not None:
        statement = statement.where(Friendship.status == status)
    statement = (
        statement.order_by(col(Friendship.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    return list(session.exec(statement).all())


def count_friendships(
    *,
    session: Session,
    user_id: UUID,
    status: FriendshipStatus | None = None,
) -> int:
    statement = select(func.count(col(Friendship.id))).where(
        or_(
            col(Friendship.requester_id) == user_id,
            col(Friendship.requestee_id) == user_id,
        )
    )
    if status is not None:
        statement = statement.where(Friendship.status == status)
    return int(session.exec(statement).one())


def get_friendships_updated_since(
    *,
    session: Session,
    user_id: UUID,
    since: datetime,
) -> list[Friendship]:
    statement = select(Friendship).where(
        or_(
            col(Friendship.requester_id) == user_id,
            col(Friendship.requestee_id) == user_id,
        ),
        col(Friendship.updated_at) >= since,
    )
    return list(session.exec(statement).all())
