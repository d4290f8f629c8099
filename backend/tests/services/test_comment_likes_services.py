from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlmodel import Session, select

from socialfeed.exceptions.comment_exceptions import CommentNotFound
from socialfeed.exceptions.rate_limit_exceptions import BurstRateLimitExceeded
from socialfeed.models.comment import Comment, CommentLike
from socialfeed.models.user import User
from socialfeed.services import comment_likes as comment_likes_services

NOW = datetime(2026, 1, 1, 12, 0, 0)


def test_toggle_like_on_and_off(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
):
    user = user_factory()
    comment = comment_factory()

    liked = comment_likes_services.toggle_comment_like(
        session=db_transaction, user_id=user.id, comment_id=comment.id, now=NOW
    )
    unliked = comment_likes_services.toggle_comment_like(
        session=db_transaction,
        user_id=user.id,
        comment_id=comment.id,
        now=NOW + timedelta(seconds=1),
    )

    assert (liked.is_liked, liked.count) == (True, 1)
    assert (unliked.is_liked, unliked.count) == (False, 0)
    assert list(db_transaction.exec(select(CommentLike)).all()) == []


def test_toggle_like_missing_comment(
    db_transaction: Session, user_factory: Callable[..., User]
):
    user = user_factory()

    with pytest.raises(CommentNotFound):
        comment_likes_services.toggle_comment_like(
            session=db_transaction, user_id=user.id, comment_id=uuid4(), now=NOW
        )


def test_unlikes_count_against_the_limit(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
):
    user = user_factory()
    comment = comment_factory()
    for i in range(5):
        comment_likes_services.toggle_comment_like(
            session=db_transaction,
            user_id=user.id,
            comment_id=comment.id,
            now=NOW + timedelta(seconds=i),
        )

    with pytest.raises(BurstRateLimitExceeded):
        comment_likes_services.toggle_comment_like(
            session=db_transaction,
            user_id=user.id,
            comment_id=comment.id,
            now=NOW + timedelta(seconds=6),
        )

    # Five toggles leave the comment liked
    status = comment_likes_services.get_comment_like_status(
        session=db_transaction, user_id=user.id, comment_id=comment.id
    )
    assert (status.is_liked, status.count) == (True, 1)


def test_like_status_for_anonymous(
    db_transaction: Session,
    comment_factory: Callable[..., Comment],
):
    comment = comment_factory(like_count=3)

    status = comment_likes_services.get_comment_like_status(
        session=db_transaction, user_id=None, comment_id=comment.id
    )

    assert (status.is_liked, status.count) == (False, 3)


def test_batch_comment_likes(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
    comment_like_factory: Callable[..., CommentLike],
):
    me = user_factory()
    popular = comment_factory()
    quiet = comment_factory()
    comment_like_factory(user_id=me.id, comment_id=popular.id)
    comment_like_factory(comment_id=popular.id)

    statuses = comment_likes_services.batch_get_comment_likes(
        session=db_transaction,
        user_id=me.id,
        comment_ids=[quiet.id, popular.id, quiet.id],
    )

    assert [(s.comment_id, s.is_liked, s.count) for s in statuses] == [
        (quiet.id, False, 0),
        (popular.id, True, 2),
        (quiet.id, False, 0),
    ]


def test_batch_comment_likes_anonymous(
    db_transaction: Session,
    comment_factory: Callable[..., Comment],
    comment_like_factory: Callable[..., CommentLike],
):
    comment = comment_factory()
    comment_like_factory(comment_id=comment.id)

    statuses = comment_likes_services.batch_get_comment_likes(
        session=db_transaction, user_id=None, comment_ids=[comment.id]
    )

    assert [(s.is_liked, s.count) for s in statuses] == [(False, 1)]
