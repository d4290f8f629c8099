from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from pytest_mock import MockerFixture
from sqlmodel import Session, select

from socialfeed.exceptions.rate_limit_exceptions import BurstRateLimitExceeded
from socialfeed.models.entry import EntryCreate, Like
from socialfeed.models.user import User
from socialfeed.services import likes as likes_services
from socialfeed.services import rate_limiter

NOW = datetime(2026, 1, 1, 12, 0, 0)


def test_like_and_status(
    db_transaction: Session,
    user_factory: Callable[..., User],
    entry_create_factory: Callable[..., EntryCreate],
):
    user = user_factory()
    entry = entry_create_factory()

    result = likes_services.like(
        session=db_transaction, user_id=user.id, entry=entry, now=NOW
    )

    assert result.like_id is not None
    status = likes_services.get_like_status(
        session=db_transaction, user_id=user.id, entry_guid=entry.entry_guid
    )
    assert (status.is_liked, status.count) == (True, 1)


def test_liking_twice_returns_existing_like(
    db_transaction: Session,
    mocker: MockerFixture,
    user_factory: Callable[..., User],
    entry_create_factory: Callable[..., EntryCreate],
):
    user = user_factory()
    entry = entry_create_factory()
    first = likes_services.like(
        session=db_transaction, user_id=user.id, entry=entry, now=NOW
    )
    enforce = mocker.spy(rate_limiter, "enforce")

    second = likes_services.like(
        session=db_transaction, user_id=user.id, entry=entry, now=NOW
    )

    assert second.like_id == first.like_id
    enforce.assert_not_called()
    assert len(db_transaction.exec(select(Like)).all()) == 1


def test_sixth_like_in_burst_window_is_refused(
    db_transaction: Session,
    user_factory: Callable[..., User],
    entry_create_factory: Callable[..., EntryCreate],
):
    user = user_factory()
    for _ in range(5):
        likes_services.like(
            session=db_transaction, user_id=user.id, entry=entry_create_factory(), now=NOW
        )

    with pytest.raises(BurstRateLimitExceeded):
        likes_services.like(
            session=db_transaction, user_id=user.id, entry=entry_create_factory(), now=NOW
        )


def test_unlike(db_transaction: Session, like_factory: Callable[..., Like]):
    existing = like_factory()

    removed = likes_services.unlike(
        session=db_transaction, user_id=existing.user_id, entry_guid=existing.entry_guid
    )
    missing = likes_services.unlike(
        session=db_transaction, user_id=existing.user_id, entry_guid=existing.entry_guid
    )

    assert removed.like_id == existing.id
    assert missing.like_id is None


def test_like_count_and_anonymous_status(
    db_transaction: Session, like_factory: Callable[..., Like]
):
    like_factory(entry_guid="shared")
    like_factory(entry_guid="shared")

    assert likes_services.get_like_count(session=db_transaction, entry_guid="shared") == 2
    assert (
        likes_services.is_liked(session=db_transaction, user_id=None, entry_guid="shared")
        is False
    )


def test_user_likes_newest_first_with_paging(
    db_transaction: Session,
    user_factory: Callable[..., User],
    like_factory: Callable[..., Like],
):
    user = user_factory()
    like_factory(user_id=user.id, entry_guid="older", liked_at=NOW)
    like_factory(user_id=user.id, entry_guid="newer", liked_at=NOW + timedelta(hours=1))
    like_factory(entry_guid="someone-else")

    page = likes_services.get_user_likes(
        session=db_transaction, user_id=user.id, limit=1
    )

    assert [like.entry_guid for like in page.likes] == ["newer"]
    assert (page.total_count, page.has_more) == (2, True)
