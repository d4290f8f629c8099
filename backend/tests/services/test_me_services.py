from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from sqlmodel import Session

from socialfeed.exceptions.rate_limit_exceptions import DailyRateLimitExceeded
from socialfeed.models.user import User, UserUpdateMe
from socialfeed.services import me as me_services

NOW = datetime(2026, 1, 1, 12, 0, 0)


def test_update_profile(db_transaction: Session, user_factory: Callable[..., User]):
    user = user_factory(name="Old", bio="old bio")

    result = me_services.update_profile(
        session=db_transaction,
        user_in=UserUpdateMe(name="  New\x00 Name ", bio="   "),
        current_user=user,
        now=NOW,
    )

    assert result.name == "New Name"
    assert result.bio is None
    assert result.rss_keys == []


def test_update_profile_leaves_unset_fields(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory(name="Kept", bio="kept bio")

    result = me_services.update_profile(
        session=db_transaction,
        user_in=UserUpdateMe(profile_image="https://cdn.example.com/a.png"),
        current_user=user,
        now=NOW,
    )

    assert (result.name, result.bio) == ("Kept", "kept bio")
    assert result.profile_image == "https://cdn.example.com/a.png"


def test_fourth_profile_update_in_a_day_is_refused(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory(name="Start")
    for i in range(3):
        me_services.update_profile(
            session=db_transaction,
            user_in=UserUpdateMe(name=f"Name {i}"),
            current_user=user,
            now=NOW + timedelta(minutes=i),
        )

    with pytest.raises(DailyRateLimitExceeded):
        me_services.update_profile(
            session=db_transaction,
            user_in=UserUpdateMe(name="One too many"),
            current_user=user,
            now=NOW + timedelta(minutes=10),
        )

    db_transaction.refresh(user)
    assert user.name == "Name 2"


def test_profile_updates_refill_next_day(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()
    for i in range(3):
        me_services.update_profile(
            session=db_transaction,
            user_in=UserUpdateMe(name=f"Name {i}"),
            current_user=user,
            now=NOW,
        )

    result = me_services.update_profile(
        session=db_transaction,
        user_in=UserUpdateMe(name="Tomorrow"),
        current_user=user,
        now=NOW + timedelta(days=1),
    )

    assert result.name == "Tomorrow"
