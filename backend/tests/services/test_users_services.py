from collections.abc import Callable
from uuid import uuid4

import pytest
from sqlmodel import Session

from socialfeed.core.security import verify_password
from socialfeed.crud import user as users_crud
from socialfeed.exceptions.user_exceptions import (
    EmailAlreadyExists,
    UsernameAlreadyExists,
    UsernameNotFound,
    UserNotFound,
)
from socialfeed.models.user import User, UserRegister
from socialfeed.services import users as users_services


def test_register_user(
    db_transaction: Session, user_register_factory: Callable[..., UserRegister]
):
    user_in = user_register_factory(password="supersecret")

    result = users_services.register_user(session=db_transaction, user_in=user_in)

    assert result.username == user_in.username
    db_user = users_crud.get_user_by_id(session=db_transaction, user_id=result.id)
    assert db_user is not None
    assert db_user.rss_keys == []
    assert verify_password("supersecret", db_user.hashed_password)


def test_register_duplicate_email(
    db_transaction: Session,
    user_factory: Callable[..., User],
    user_register_factory: Callable[..., UserRegister],
):
    existing = user_factory()

    with pytest.raises(EmailAlreadyExists):
        users_services.register_user(
            session=db_transaction,
            user_in=user_register_factory(email=existing.email),
        )


def test_register_duplicate_username(
    db_transaction: Session,
    user_factory: Callable[..., User],
    user_register_factory: Callable[..., UserRegister],
):
    existing = user_factory()

    with pytest.raises(UsernameAlreadyExists):
        users_services.register_user(
            session=db_transaction,
            user_in=user_register_factory(username=existing.username),
        )


def test_get_user(db_transaction: Session, user_factory: Callable[..., User]):
    user = user_factory()

    assert users_services.get_user(session=db_transaction, user_id=user.id).id == user.id
    assert (
        users_services.get_user_by_username(
            session=db_transaction, username=user.username
        ).id
        == user.id
    )


def test_get_missing_user(db_transaction: Session):
    with pytest.raises(UserNotFound):
        users_services.get_user(session=db_transaction, user_id=uuid4())
    with pytest.raises(UsernameNotFound):
        users_services.get_user_by_username(session=db_transaction, username="ghost")
