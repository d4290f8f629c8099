import uuid

from fastapi import APIRouter, Query

from socialfeed.api.deps import CurrentUser, OptionalCurrentUser, SessionDep
from socialfeed.core.enums import FriendshipStatus
from socialfeed.schemas.friendship import (
    BatchFriendshipStatus,
    FriendNotification,
    FriendPublic,
    FriendshipDeleted,
    FriendshipPublic,
    FriendshipStatusPublic,
)
from socialfeed.services import friends as friends_service

router = APIRouter(prefix="/friends", tags=["friends"])


@router.post("/requests/{requestee_id}", response_model=uuid.UUID)
def send_friend_request(
    *, session: SessionDep, current_user: CurrentUser, requestee_id: uuid.UUID
) -> uuid.UUID:
    return friends_service.send_friend_request(
        session=session,
        requester_id=current_user.id,
        requestee_id=requestee_id,
    )


@router.post("/{friendship_id}/accept", response_model=FriendshipPublic)
def accept_friend_request(
    *, session: SessionDep, current_user: CurrentUser, friendship_id: uuid.UUID
) -> FriendshipPublic:
    return friends_service.accept_friend_request(
        session=session,
        current_user_id=current_user.id,
        friendship_id=friendship_id,
    )


@router.delete("/{friendship_id}", response_model=FriendshipDeleted)
def delete_friendship(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    friendship_id: uuid.UUID,
) -> FriendshipDeleted:
    return friends_service.delete_friendship(
        session=session,
        current_user_id=current_user.id,
        friendship_id=friendship_id,
    )


@router.get("/status/username/{username}", response_model=FriendshipStatusPublic)
def get_friendship_status_by_username(
    *, session: SessionDep, current_user: OptionalCurrentUser, username: str
) -> FriendshipStatusPublic:
    return friends_service.get_friendship_status_by_username(
        session=session,
        current_user_id=current_user.id if current_user else None,
        username=username,
    )


@router.get("/status/user/{user_id}", response_model=FriendshipStatusPublic)
def get_friendship_status_by_user_id(
    *, session: SessionDep, current_user: OptionalCurrentUser, user_id: uuid.UUID
) -> FriendshipStatusPublic:
    return friends_service.get_friendship_status_by_user_id(
        session=session,
        current_user_id=current_user.id if current_user else None,
        user_id=user_id,
    )


@router.get("/statuses", response_model=list[BatchFriendshipStatus])
def get_batch_friendship_statuses(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    user_ids: list[uuid.UUID] = Query([]),
) -> list[BatchFriendshipStatus]:
    return friends_service.get_batch_friendship_statuses(
        session=session,
        current_user_id=current_user.id,
        user_ids=user_ids,
    )


@router.get("/notifications", response_model=list[FriendNotification])
def get_friend_notifications(
    *, session: SessionDep, current_user: CurrentUser
) -> list[FriendNotification]:
    return friends_service.get_friend_notifications(
        session=session, current_user_id=current_user.id
    )


@router.get("/users/{username}", response_model=list[FriendPublic])
def get_friends_by_username(
    *,
    session: SessionDep,
    username: str,
    status: FriendshipStatus | None = FriendshipStatus.ACCEPTED,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[FriendPublic]:
    return friends_service.get_friends_by_username(
        session=session,
        username=username,
        status=status,
        limit=limit,
        offset=offset,
    )


@router.get("/users/{username}/count", response_model=int)
def get_friend_count_by_username(
    *,
    session: SessionDep,
    username: str,
    status: FriendshipStatus | None = FriendshipStatus.ACCEPTED,
) -> int:
    return friends_service.get_friend_count_by_username(
        session=session, username=username, status=status
    )
