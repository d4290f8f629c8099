from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from pytest_mock import MockerFixture
from sqlmodel import Session, select

from socialfeed.core.enums import FollowAction
from socialfeed.exceptions.base import AppError
from socialfeed.exceptions.rate_limit_exceptions import (
    BurstRateLimitExceeded,
    CooldownActive,
)
from socialfeed.models.following import Following
from socialfeed.models.user import User
from socialfeed.services import following as following_services

NOW = datetime(2026, 1, 1, 12, 0, 0)
FEED = "https://a.com/rss"


def _rows(session: Session, user: User, post_id: str) -> list[Following]:
    return list(
        session.exec(
            select(Following).where(
                Following.user_id == user.id, Following.post_id == post_id
            )
        ).all()
    )


def test_first_follow(db_transaction: Session, user_factory: Callable[..., User]):
    user = user_factory(rss_keys=[])

    result = following_services.follow(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        feed_url=FEED,
        rss_key="a.com",
        now=NOW,
    )

    assert result.success is True
    assert result.action == FollowAction.FOLLOWED
    assert following_services.is_following(
        session=db_transaction, user_id=user.id, post_id="P1"
    )
    db_transaction.refresh(user)
    assert user.rss_keys == ["a.com"]


def test_follow_unfollow_round_trip(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()

    following_services.follow(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        feed_url=FEED,
        rss_key="a.com",
        now=NOW,
    )
    result = following_services.unfollow(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        rss_key="a.com",
        now=NOW + timedelta(seconds=3),
    )

    assert result.success is True
    assert result.action == FollowAction.UNFOLLOWED
    assert not following_services.is_following(
        session=db_transaction, user_id=user.id, post_id="P1"
    )
    db_transaction.refresh(user)
    assert "a.com" not in user.rss_keys


def test_follow_twice_within_cooldown(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()
    kwargs = dict(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        feed_url=FEED,
        rss_key="a.com",
    )
    following_services.follow(**kwargs, now=NOW)

    with pytest.raises(CooldownActive) as exc_info:
        following_services.follow(**kwargs, now=NOW + timedelta(milliseconds=500))

    assert exc_info.value.status_code == 429
    assert len(_rows(db_transaction, user, "P1")) == 1


def test_follow_again_after_cooldown_is_noop(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()
    kwargs = dict(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        feed_url=FEED,
        rss_key="a.com",
    )
    following_services.follow(**kwargs, now=NOW)

    result = following_services.follow(**kwargs, now=NOW + timedelta(seconds=5))

    assert result.success is True
    assert len(_rows(db_transaction, user, "P1")) == 1
    db_transaction.refresh(user)
    assert user.rss_keys == ["a.com"]


def test_global_cooldown_spans_posts(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()
    following_services.follow(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        feed_url=FEED,
        rss_key="a.com",
        now=NOW,
    )

    with pytest.raises(CooldownActive) as exc_info:
        following_services.follow(
            session=db_transaction,
            user_id=user.id,
            post_id="P2",
            feed_url="https://b.com/rss",
            rss_key="b.com",
            now=NOW + timedelta(seconds=1),
        )

    assert exc_info.value.retry_after == pytest.approx(1.0)
    assert _rows(db_transaction, user, "P2") == []


def test_follow_burst_window(
    db_transaction: Session,
    user_factory: Callable[..., User],
    following_factory: Callable[..., Following],
):
    user = user_factory()
    for i in range(10):
        following_factory(
            user_id=user.id,
            post_id=f"old-{i}",
            followed_at=NOW - timedelta(seconds=59 - i),
        )

    with pytest.raises(BurstRateLimitExceeded) as exc_info:
        following_services.follow(
            session=db_transaction,
            user_id=user.id,
            post_id="P1",
            feed_url=FEED,
            rss_key="a.com",
            now=NOW,
        )

    assert exc_info.value.retry_after == pytest.approx(1.0)
    assert _rows(db_transaction, user, "P1") == []


def test_unfollow_keeps_key_shared_by_another_post(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()
    for offset, post_id in enumerate(("P1", "P2")):
        following_services.follow(
            session=db_transaction,
            user_id=user.id,
            post_id=post_id,
            feed_url=FEED,
            rss_key="a.com",
            now=NOW + timedelta(seconds=3 * offset),
        )

    following_services.unfollow(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        rss_key="a.com",
        now=NOW + timedelta(seconds=10),
    )
    db_transaction.refresh(user)
    assert user.rss_keys == ["a.com"]

    following_services.unfollow(
        session=db_transaction,
        user_id=user.id,
        post_id="P2",
        rss_key="a.com",
        now=NOW + timedelta(seconds=20),
    )
    db_transaction.refresh(user)
    assert user.rss_keys == []


def test_unfollow_not_following(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()

    result = following_services.unfollow(
        session=db_transaction,
        user_id=user.id,
        post_id="P1",
        rss_key="a.com",
        now=NOW,
    )

    assert result.success is False
    assert result.error == "Not following this post."


def test_follow_rolls_back_on_unexpected_error(
    db_transaction: Session,
    user_factory: Callable[..., User],
    mocker: MockerFixture,
):
    user = user_factory()
    db_transaction.commit()
    mocker.patch(
        "socialfeed.crud.user.set_rss_keys", side_effect=RuntimeError("boom")
    )

    with pytest.raises(AppError):
        following_services.follow(
            session=db_transaction,
            user_id=user.id,
            post_id="P1",
            feed_url=FEED,
            rss_key="a.com",
            now=NOW,
        )

    assert _rows(db_transaction, user, "P1") == []


def test_get_follow_states_is_positional(
    db_transaction: Session,
    user_factory: Callable[..., User],
    following_factory: Callable[..., Following],
):
    user = user_factory()
    following_factory(user_id=user.id, post_id="P2")

    states = following_services.get_follow_states(
        session=db_transaction, user_id=user.id, post_ids=["P1", "P2", "P3", "P2"]
    )

    assert states == [False, True, False, True]


def test_get_follow_states_queries_in_chunks(mocker: MockerFixture):
    mock_crud = mocker.patch(
        "socialfeed.crud.following.get_followed_post_ids", return_value={"p-7"}
    )
    mock_session = mocker.MagicMock()
    post_ids = [f"p-{i}" for i in range(120)]

    states = following_services.get_follow_states(
        session=mock_session, user_id=mocker.sentinel.user_id, post_ids=post_ids
    )

    assert [len(c.kwargs["post_ids"]) for c in mock_crud.call_args_list] == [50, 50, 20]
    assert states.count(True) == 1
    assert states[7] is True


def test_get_follow_states_anonymous(db_transaction: Session):
    assert following_services.get_follow_states(
        session=db_transaction, user_id=None, post_ids=["P1", "P2"]
    ) == [False, False]


def test_following_count(
    db_transaction: Session, following_factory: Callable[..., Following]
):
    following_factory(post_id="P1")
    following_factory(post_id="P1")
    following_factory(post_id="P2")

    assert following_services.get_following_count(
        session=db_transaction, post_id="P1"
    ) == 2
