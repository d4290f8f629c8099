from uuid import UUID

from fastapi import status

from .base import AlreadyExists, AppError, NotAuthorized, NotFound, ValidationFailed


class FriendRequestNotFoundError(NotFound):
    def __init__(self, friendship_id: UUID):
        detail = f"Friend request not found. No friendship with id {friendship_id}."
        super().__init__(detail)


class FriendshipNotFoundError(NotFound):
    def __init__(self, friendship_id: UUID):
        detail = f"Friendship not found. No friendship with id {friendship_id}."
        super().__init__(detail)


class FriendshipAlreadyExistsError(AlreadyExists):
    def __init__(self, user_id: UUID, friend_id: UUID):
        detail = f"Friendship already exists. User with id {user_id} is already friends with user with id {friend_id}."
        super().__init__(detail)


class FriendRequestAlreadyExistsError(AlreadyExists):
    def __init__(self, sender_id: UUID, receiver_id: UUID):
        detail = f"Friend request already sent. User with id {sender_id} has already requested friendship with user {receiver_id}."
        super().__init__(detail)


class SelfFriendRequestError(ValidationFailed):
    detail = "Cannot send friend request to yourself."


class NotFriendRequestRecipient(NotAuthorized):
    detail = "Not authorized to accept this friend request."


class NotFriendshipMember(NotAuthorized):
    detail = "Not authorized to delete this friendship."


class FriendRequestNotPending(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "ALREADY_EXISTS"

    def __init__(self, friendship_id: UUID):
        detail = f"Friend request {friendship_id} is not pending."
        super().__init__(detail)
