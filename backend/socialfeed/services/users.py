from uuid import UUID

from psycopg.errors import UniqueViolation
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from socialfeed.converters import user as user_converters
from socialfeed.crud import user as users_crud
from socialfeed.exceptions.base import AppError
from socialfeed.exceptions.user_exceptions import (
    EmailAlreadyExists,
    UsernameAlreadyExists,
    UsernameNotFound,
    UserNotFound,
)
from socialfeed.models.user import UserCreate, UserRegister
from socialfeed.schemas.user import UserPublic


def get_user(
    *,
    session: Session,
    user_id: UUID,
) -> UserPublic:
    """
    Get a user by their ID.

    Parameters:
        session (Session): Database session.
        user_id (UUID): ID of the user to retrieve.
    Returns:
        UserPublic: The public representation of the user.
    Raises:
        UserNotFound: If the user with the given ID does not exist.
    """
    user_db = users_crud.get_user_by_id(session=session, user_id=user_id)
    if not user_db:
        raise UserNotFound(user_id)
    return user_converters.to_public(user_db)


def get_user_by_username(
    *,
    session: Session,
    username: str,
) -> UserPublic:
    user_db = users_crud.get_user_by_username(session=session, username=username)
    if not user_db:
        raise UsernameNotFound(username)
    return user_converters.to_public(user_db)


def register_user(
    *,
    session: Session,
    user_in: UserRegister,
) -> UserPublic:
    """
    Register a new user in the system.

    Parameters:
        session (Session): Database session.
        user_in (UserRegister): User registration data.
    Returns:
        UserPublic: The public representation of the newly created user.
    Raises:
        EmailAlreadyExists: If a user with the given email already exists.
        UsernameAlreadyExists: If the username is taken.
        AppError: If there is an error during user creation.
    """
    if users_crud.get_user_by_email(session=session, email=user_in.email):
        raise EmailAlreadyExists(user_in.email)
    if users_crud.get_user_by_username(session=session, username=user_in.username):
        raise UsernameAlreadyExists(user_in.username)

    user_create = UserCreate.model_validate(user_in)
    try:
        user = users_crud.create_user(
            session=session,
            user_create=user_create,
        )
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if isinstance(e.orig, UniqueViolation):
            raise UsernameAlreadyExists(user_in.username) from e
        else:
            raise AppError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    user_public = user_converters.to_public(user)
    return user_public
