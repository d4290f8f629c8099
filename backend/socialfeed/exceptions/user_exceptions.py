from uuid import UUID

from fastapi import status

from .base import AlreadyExists, AppError, NotFound


class UserNotFound(NotFound):
    def __init__(self, user_id: UUID):
        detail = f"User with id {user_id} not found."
        super().__init__(detail)


class UsernameNotFound(NotFound):
    def __init__(self, username: str):
        detail = f"User with username {username} not found."
        super().__init__(detail)


class EmailAlreadyExists(AlreadyExists):
    def __init__(self, email: str):
        detail = f"User with email {email} already exists."
        super().__init__(detail)


class UsernameAlreadyExists(AlreadyExists):
    def __init__(self, username: str):
        detail = f"User with username {username} already exists."
        super().__init__(detail)


class InactiveUser(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INACTIVE_USER"
    detail = "Inactive user"
