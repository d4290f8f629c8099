from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from pytest_mock import MockerFixture
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from socialfeed.core.enums import RetweetAction
from socialfeed.exceptions.base import AppError
from socialfeed.exceptions.rate_limit_exceptions import BurstRateLimitExceeded
from socialfeed.models.entry import EntryCreate, Retweet
from socialfeed.models.user import User
from socialfeed.services import retweets as retweets_services

NOW = datetime(2026, 1, 1, 12, 0, 0)


def test_retweet_toggles(
    db_transaction: Session,
    user_factory: Callable[..., User],
    entry_create_factory: Callable[..., EntryCreate],
):
    user = user_factory()
    entry = entry_create_factory()

    first = retweets_services.retweet(
        session=db_transaction, user_id=user.id, entry=entry, now=NOW
    )
    second = retweets_services.retweet(
        session=db_transaction, user_id=user.id, entry=entry, now=NOW
    )

    assert first.action == RetweetAction.RETWEETED
    assert second.action == RetweetAction.UNRETWEETED
    assert second.retweet_id == first.retweet_id
    status = retweets_services.get_retweet_status(
        session=db_transaction, user_id=user.id, entry_guid=entry.entry_guid
    )
    assert (status.is_retweeted, status.count) == (False, 0)


def test_retweet_copies_entry_fields(
    db_transaction: Session,
    user_factory: Callable[..., User],
    entry_create_factory: Callable[..., EntryCreate],
):
    user = user_factory()
    entry = entry_create_factory(title="A post", link="https://a.com/p/1")

    result = retweets_services.retweet(
        session=db_transaction, user_id=user.id, entry=entry, now=NOW
    )

    stored = db_transaction.get(Retweet, result.retweet_id)
    assert stored is not None
    assert (stored.title, stored.link, stored.retweeted_at) == (
        "A post",
        "https://a.com/p/1",
        NOW,
    )


def test_removing_a_retweet_is_not_limited(
    db_transaction: Session,
    user_factory: Callable[..., User],
    entry_create_factory: Callable[..., EntryCreate],
):
    user = user_factory()
    entries = [entry_create_factory() for _ in range(3)]
    for entry in entries:
        retweets_services.retweet(
            session=db_transaction, user_id=user.id, entry=entry, now=NOW
        )

    with pytest.raises(BurstRateLimitExceeded):
        retweets_services.retweet(
            session=db_transaction,
            user_id=user.id,
            entry=entry_create_factory(),
            now=NOW + timedelta(seconds=1),
        )

    result = retweets_services.retweet(
        session=db_transaction,
        user_id=user.id,
        entry=entries[0],
        now=NOW + timedelta(seconds=2),
    )
    assert result.action == RetweetAction.UNRETWEETED
    assert len(db_transaction.exec(select(Retweet)).all()) == 2


def test_unretweet_missing_is_not_an_error(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()

    result = retweets_services.unretweet(
        session=db_transaction, user_id=user.id, entry_guid="never-retweeted"
    )

    assert result.success is True
    assert result.not_found is True


def test_unretweet_existing(
    db_transaction: Session, retweet_factory: Callable[..., Retweet]
):
    existing = retweet_factory()

    result = retweets_services.unretweet(
        session=db_transaction,
        user_id=existing.user_id,
        entry_guid=existing.entry_guid,
    )

    assert result.not_found is False
    assert db_transaction.exec(select(Retweet)).all() == []


def test_batch_retweet_counts(
    db_transaction: Session,
    user_factory: Callable[..., User],
    retweet_factory: Callable[..., Retweet],
):
    me = user_factory()
    retweet_factory(user_id=me.id, entry_guid="a")
    retweet_factory(entry_guid="a")
    retweet_factory(entry_guid="b")

    statuses = retweets_services.batch_get_retweet_counts(
        session=db_transaction, user_id=me.id, entry_guids=["a", "b", "c"]
    )

    assert {guid: (s.is_retweeted, s.count) for guid, s in statuses.items()} == {
        "a": (True, 2),
        "b": (False, 1),
        "c": (False, 0),
    }


def test_get_user_retweets_newest_first(
    db_transaction: Session,
    user_factory: Callable[..., User],
    retweet_factory: Callable[..., Retweet],
):
    user = user_factory()
    older = retweet_factory(user_id=user.id, retweeted_at=NOW)
    newer = retweet_factory(user_id=user.id, retweeted_at=NOW + timedelta(hours=1))
    retweet_factory()

    retweets = retweets_services.get_user_retweets(
        session=db_transaction, user_id=user.id
    )

    assert [r.id for r in retweets] == [newer.id, older.id]


def test_unrelated_integrity_error_is_not_reported_as_duplicate(
    db_transaction: Session,
    mocker: MockerFixture,
    user_factory: Callable[..., User],
    entry_create_factory: Callable[..., EntryCreate],
):
    user = user_factory()
    mocker.patch(
        "socialfeed.crud.retweet.create_retweet",
        side_effect=IntegrityError("INSERT", {}, Exception("check constraint")),
    )

    with pytest.raises(AppError) as exc_info:
        retweets_services.retweet(
            session=db_transaction, user_id=user.id, entry=entry_create_factory()
        )

    assert type(exc_info.value) is AppError
