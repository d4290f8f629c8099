from datetime import datetime, timedelta
from logging import getLogger
from uuid import UUID

from psycopg.errors import ForeignKeyViolation, UniqueViolation
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from socialfeed.converters import friendship as friendship_converters
from socialfeed.converters import user as user_converters
from socialfeed.core.enums import (
    FriendshipDirection,
    FriendshipStatus,
    NotificationType,
    RelationStatus,
)
from socialfeed.core.rate_limits import FRIENDS_TIERS
from socialfeed.crud import friendship as friendship_crud
from socialfeed.crud import user as users_crud
from socialfeed.exceptions.base import AppError
from socialfeed.exceptions.friends_exceptions import (
    FriendRequestAlreadyExistsError,
    FriendRequestNotFoundError,
    FriendRequestNotPending,
    FriendshipAlreadyExistsError,
    FriendshipNotFoundError,
    NotFriendRequestRecipient,
    NotFriendshipMember,
    SelfFriendRequestError,
)
from socialfeed.exceptions.user_exceptions import UserNotFound, UsernameNotFound
from socialfeed.models.friendship import Friendship
from socialfeed.schemas.friendship import (
    BatchFriendshipStatus,
    FriendNotification,
    FriendPublic,
    FriendshipDeleted,
    FriendshipPublic,
    FriendshipStatusPublic,
)
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive

logger = getLogger(__name__)

NOTIFICATION_WINDOW = timedelta(days=30)


def send_friend_request(
    *,
    session: Session,
    requester_id: UUID,
    requestee_id: UUID,
    now: datetime | None = None,
) -> UUID:
    """
    Send a friend request from requester to requestee.
    If the requestee already sent a pending request to the requester, that
    request is accepted instead of creating a second row.

    Returns:
        UUID: The id of the created or accepted friendship.
    Raises:
        SelfFriendRequestError: If requester and requestee are the same user.
        RateLimitExceeded: If a friends burst/hourly/daily limit is reached.
        UserNotFound: If the requestee does not exist.
        FriendRequestAlreadyExistsError: If the request was already sent.
        FriendshipAlreadyExistsError: If the users are already friends.
        AppError: For any other (unexpected) errors.
    """
    if requester_id == requestee_id:
        raise SelfFriendRequestError()

    now = now or now_utc_naive()
    try:
        rate_limiter.enforce(
            session=session, key=str(requester_id), names=FRIENDS_TIERS, now=now
        )

        if users_crud.get_user_by_id(session=session, user_id=requestee_id) is None:
            raise UserNotFound(requestee_id)

        sent = friendship_crud.get_friendship(
            session=session, requester_id=requester_id, requestee_id=requestee_id
        )
        if sent is not None:
            if sent.status == FriendshipStatus.ACCEPTED:
                raise FriendshipAlreadyExistsError(requester_id, requestee_id)
            raise FriendRequestAlreadyExistsError(requester_id, requestee_id)

        received = friendship_crud.get_friendship(
            session=session, requester_id=requestee_id, requestee_id=requester_id
        )
        if received is not None:
            if received.status == FriendshipStatus.ACCEPTED:
                raise FriendshipAlreadyExistsError(requester_id, requestee_id)
            friendship = friendship_crud.accept_friendship(
                session=session, friendship=received, now=now
            )
            logger.info(
                "Reciprocal friend request auto-accepted between %s and %s",
                requester_id,
                requestee_id,
            )
        else:
            friendship = friendship_crud.create_friend_request(
                session=session,
                requester_id=requester_id,
                requestee_id=requestee_id,
                now=now,
            )
        friendship_id = friendship.id
        session.commit()
    except AppError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        if isinstance(e.orig, ForeignKeyViolation):
            raise UserNotFound(requestee_id) from e
        if isinstance(e.orig, UniqueViolation):
            raise FriendRequestAlreadyExistsError(requester_id, requestee_id) from e
        raise AppError from e
    except Exception as e:
        session.rollback()
        raise AppError from e
    return friendship_id


def accept_friend_request(
    *,
    session: Session,
    current_user_id: UUID,
    friendship_id: UUID,
    now: datetime | None = None,
) -> FriendshipPublic:
    """
    Accept a pending friend request addressed to the current user.

    Raises:
        FriendRequestNotFoundError: If the friendship does not exist.
        NotFriendRequestRecipient: If the current user is not the requestee.
        FriendRequestNotPending: If the request was already accepted.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        friendship = friendship_crud.get_friendship_by_id(
            session=session, friendship_id=friendship_id
        )
        if friendship is None:
            raise FriendRequestNotFoundError(friendship_id)
        if friendship.requestee_id != current_user_id:
            raise NotFriendRequestRecipient()
        if friendship.status != FriendshipStatus.PENDING:
            raise FriendRequestNotPending(friendship_id)

        friendship_crud.accept_friendship(session=session, friendship=friendship, now=now)
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e
    return friendship_converters.to_public(friendship)


def delete_friendship(
    *,
    session: Session,
    current_user_id: UUID,
    friendship_id: UUID,
) -> FriendshipDeleted:
    """
    Delete a friendship or friend request. Covers unfriending, declining a
    received request and cancelling a sent one.

    Raises:
        FriendshipNotFoundError: If the friendship does not exist.
        NotFriendshipMember: If the current user is neither party.
        AppError: For any other (unexpected) errors.
    """
    try:
        friendship = friendship_crud.get_friendship_by_id(
            session=session, friendship_id=friendship_id
        )
        if friendship is None:
            raise FriendshipNotFoundError(friendship_id)
        if current_user_id not in (friendship.requester_id, friendship.requestee_id):
            raise NotFriendshipMember()

        friendship_crud.delete_friendship(session=session, friendship=friendship)
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e
    return FriendshipDeleted(friendship_id=friendship_id)


def _status_between(
    *,
    session: Session,
    current_user_id: UUID,
    other_user_id: UUID,
) -> FriendshipStatusPublic:
    if current_user_id == other_user_id:
        return FriendshipStatusPublic(exists=False, status=RelationStatus.SELF.value)

    sent = friendship_crud.get_friendship(
        session=session, requester_id=current_user_id, requestee_id=other_user_id
    )
    if sent is not None:
        return FriendshipStatusPublic(
            exists=True,
            status=sent.status.value,
            direction=FriendshipDirection.SENT,
            friendship_id=sent.id,
        )

    received = friendship_crud.get_friendship(
        session=session, requester_id=other_user_id, requestee_id=current_user_id
    )
    if received is not None:
        return FriendshipStatusPublic(
            exists=True,
            status=received.status.value,
            direction=FriendshipDirection.RECEIVED,
            friendship_id=received.id,
        )

    return FriendshipStatusPublic(exists=False)


def get_friendship_status_by_username(
    *,
    session: Session,
    current_user_id: UUID | None,
    username: str,
) -> FriendshipStatusPublic:
    """
    Get the friendship between the current user and the user with ``username``.

    Raises:
        UsernameNotFound: If no user has that username.
    """
    if current_user_id is None:
        return FriendshipStatusPublic(exists=False)

    user = users_crud.get_user_by_username(session=session, username=username)
    if user is None:
        raise UsernameNotFound(username)

    return _status_between(
        session=session, current_user_id=current_user_id, other_user_id=user.id
    )


def get_friendship_status_by_user_id(
    *,
    session: Session,
    current_user_id: UUID | None,
    user_id: UUID,
) -> FriendshipStatusPublic:
    if current_user_id is None:
        return FriendshipStatusPublic(exists=False)
    return _status_between(
        session=session, current_user_id=current_user_id, other_user_id=user_id
    )


def get_batch_friendship_statuses(
    *,
    session: Session,
    current_user_id: UUID,
    user_ids: list[UUID],
) -> list[BatchFriendshipStatus]:
    """
    Get the friendship status with many users at once.
    Loads all sent and received friendships of the current user once and
    answers every id from memory.

    Returns:
        list[BatchFriendshipStatus]: One record per id, in the order of ``user_ids``.
    """
    by_user: dict[UUID, tuple[Friendship, FriendshipDirection]] = {}
    for friendship in friendship_crud.get_sent_friendships(
        session=session, user_id=current_user_id
    ):
        by_user[friendship.requestee_id] = (friendship, FriendshipDirection.SENT)
    for friendship in friendship_crud.get_received_friendships(
        session=session, user_id=current_user_id
    ):
        by_user.setdefault(
            friendship.requester_id, (friendship, FriendshipDirection.RECEIVED)
        )

    statuses = []
    for user_id in user_ids:
        if user_id == current_user_id:
            statuses.append(BatchFriendshipStatus(user_id=user_id, status=RelationStatus.SELF))
            continue
        match = by_user.get(user_id)
        if match is None:
            statuses.append(BatchFriendshipStatus(user_id=user_id, status=RelationStatus.NONE))
            continue
        friendship, direction = match
        statuses.append(
            BatchFriendshipStatus(
                user_id=user_id,
                status=RelationStatus(friendship.status.value),
                direction=direction,
                friendship_id=friendship.id,
            )
        )
    return statuses


def _other_party(friendship: Friendship, user_id: UUID) -> tuple[UUID, FriendshipDirection]:
    if friendship.requester_id == user_id:
        return friendship.requestee_id, FriendshipDirection.SENT
    return friendship.requester_id, FriendshipDirection.RECEIVED


def get_friends_by_username(
    *,
    session: Session,
    username: str,
    status: FriendshipStatus | None,
    limit: int,
    offset: int,
) -> list[FriendPublic]:
    """
    List the friendships of a user with the other party's display data, newest first.
    Friendships whose other user no longer exists are skipped.

    Raises:
        UsernameNotFound: If no user has that username.
    """
    user = users_crud.get_user_by_username(session=session, username=username)
    if user is None:
        raise UsernameNotFound(username)

    friendships = friendship_crud.get_friendships_for_user(
        session=session, user_id=user.id, status=status, limit=limit, offset=offset
    )
    others = {f.id: _other_party(f, user.id) for f in friendships}
    users = {
        u.id: user_converters.to_display(u)
        for u in users_crud.get_users_by_ids(
            session=session, user_ids=[other for other, _ in others.values()]
        )
    }

    friends = []
    for friendship in friendships:
        other_id, direction = others[friendship.id]
        display = users.get(other_id)
        if display is None:
            continue
        friends.append(
            FriendPublic(
                friendship=friendship_converters.to_public(friendship),
                direction=direction,
                user=display,
            )
        )
    return friends


def get_friend_count_by_username(
    *,
    session: Session,
    username: str,
    status: FriendshipStatus | None,
) -> int:
    user = users_crud.get_user_by_username(session=session, username=username)
    if user is None:
        raise UsernameNotFound(username)
    return friendship_crud.count_friendships(
        session=session, user_id=user.id, status=status
    )


def get_friend_notifications(
    *,
    session: Session,
    current_user_id: UUID,
    now: datetime | None = None,
) -> list[FriendNotification]:
    """
    Incoming pending requests and accepted friendships from the last 30 days,
    newest first.
    """
    now = now or now_utc_naive()
    friendships = friendship_crud.get_friendships_updated_since(
        session=session, user_id=current_user_id, since=now - NOTIFICATION_WINDOW
    )

    entries: list[tuple[Friendship, NotificationType, UUID, FriendshipDirection]] = []
    for friendship in friendships:
        other_id, direction = _other_party(friendship, current_user_id)
        if friendship.status == FriendshipStatus.PENDING:
            if direction == FriendshipDirection.RECEIVED:
                entries.append(
                    (friendship, NotificationType.FRIEND_REQUEST, other_id, direction)
                )
        elif direction == FriendshipDirection.SENT:
            entries.append(
                (friendship, NotificationType.FRIEND_ACCEPTED, other_id, direction)
            )
        else:
            entries.append(
                (friendship, NotificationType.FRIEND_YOU_ACCEPTED, other_id, direction)
            )

    users = {
        u.id: user_converters.to_display(u)
        for u in users_crud.get_users_by_ids(
            session=session, user_ids=[other_id for _, _, other_id, _ in entries]
        )
    }

    notifications = [
        FriendNotification(
            type=notification_type,
            friendship_id=friendship.id,
            direction=direction,
            status=friendship.status,
            created_at=friendship.updated_at,
            user=users[other_id],
        )
        for friendship, notification_type, other_id, direction in entries
        if other_id in users
    ]
    notifications.sort(key=lambda n: n.created_at, reverse=True)
    return notifications
