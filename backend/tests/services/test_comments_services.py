from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlmodel import Session, select

from socialfeed.exceptions.comment_exceptions import (
    CommentNotFound,
    CommentTooLong,
    EmptyComment,
    NotCommentAuthor,
    ParentCommentNotFound,
    ParentEntryMismatch,
)
from socialfeed.exceptions.rate_limit_exceptions import BurstRateLimitExceeded
from socialfeed.models.comment import Comment, CommentLike
from socialfeed.models.user import User
from socialfeed.schemas.comment import CommentCreate
from socialfeed.services import comments as comments_services

NOW = datetime(2026, 1, 1, 12, 0, 0)


def _all_comments(session: Session) -> list[Comment]:
    return list(session.exec(select(Comment)).all())


def test_add_comment_stores_trimmed_content_and_username(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_create_factory: Callable[..., CommentCreate],
):
    user = user_factory(username="alice")

    result = comments_services.add_comment(
        session=db_transaction,
        user_id=user.id,
        comment_in=comment_create_factory(content="  hello\x07 world  "),
        now=NOW,
    )

    comment = db_transaction.get(Comment, result.comment_id)
    assert comment is not None
    assert comment.content == "hello world"
    assert comment.username == "alice"
    assert comment.created_at == NOW
    assert comment.like_count == 0


@pytest.mark.parametrize(
    "content, error",
    [
        ("", EmptyComment),
        ("   \n\t ", EmptyComment),
        ("\x01\x02\x7f", EmptyComment),
        (" \x00 \x1b ", EmptyComment),
        ("x" * 501, CommentTooLong),
    ],
)
def test_add_comment_invalid_content(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_create_factory: Callable[..., CommentCreate],
    content: str,
    error: type[Exception],
):
    user = user_factory()

    with pytest.raises(error):
        comments_services.add_comment(
            session=db_transaction,
            user_id=user.id,
            comment_in=comment_create_factory(content=content),
            now=NOW,
        )

    assert _all_comments(db_transaction) == []


def test_add_comment_accepts_max_length_after_trim(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_create_factory: Callable[..., CommentCreate],
):
    user = user_factory()

    comments_services.add_comment(
        session=db_transaction,
        user_id=user.id,
        comment_in=comment_create_factory(content="  " + "x" * 500 + "  "),
        now=NOW,
    )

    assert len(_all_comments(db_transaction)) == 1


def test_sixth_comment_in_burst_window_is_refused(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_create_factory: Callable[..., CommentCreate],
):
    user = user_factory()
    for i in range(5):
        comments_services.add_comment(
            session=db_transaction,
            user_id=user.id,
            comment_in=comment_create_factory(),
            now=NOW + timedelta(seconds=i),
        )

    with pytest.raises(BurstRateLimitExceeded) as exc_info:
        comments_services.add_comment(
            session=db_transaction,
            user_id=user.id,
            comment_in=comment_create_factory(),
            now=NOW + timedelta(seconds=10),
        )

    assert exc_info.value.retry_after == pytest.approx(20)
    assert len(_all_comments(db_transaction)) == 5


def test_reply_to_missing_parent(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_create_factory: Callable[..., CommentCreate],
):
    user = user_factory()

    with pytest.raises(ParentCommentNotFound):
        comments_services.add_comment(
            session=db_transaction,
            user_id=user.id,
            comment_in=comment_create_factory(parent_id=uuid4()),
            now=NOW,
        )


def test_reply_must_be_on_parent_entry(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
    comment_create_factory: Callable[..., CommentCreate],
):
    user = user_factory()
    parent = comment_factory(entry_guid="entry-a")

    with pytest.raises(ParentEntryMismatch):
        comments_services.add_comment(
            session=db_transaction,
            user_id=user.id,
            comment_in=comment_create_factory(entry_guid="entry-b", parent_id=parent.id),
            now=NOW,
        )

    assert len(_all_comments(db_transaction)) == 1


def test_delete_comment_removes_whole_subtree(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
    comment_like_factory: Callable[..., CommentLike],
):
    author = user_factory()
    root = comment_factory(user_id=author.id)
    first = comment_factory(parent_id=root.id)
    second = comment_factory(parent_id=root.id)
    nested = comment_factory(parent_id=first.id)
    deepest = comment_factory(parent_id=nested.id)
    unrelated = comment_factory()
    comment_like_factory(comment_id=deepest.id)
    comment_like_factory(comment_id=second.id)
    kept_like = comment_like_factory(comment_id=unrelated.id)

    result = comments_services.delete_comment(
        session=db_transaction, user_id=author.id, comment_id=root.id
    )

    assert result.success is True
    assert result.deleted == 5
    assert [c.id for c in _all_comments(db_transaction)] == [unrelated.id]
    likes = list(db_transaction.exec(select(CommentLike)).all())
    assert [like.id for like in likes] == [kept_like.id]


def test_delete_comment_with_no_replies(
    db_transaction: Session, comment_factory: Callable[..., Comment]
):
    comment = comment_factory()

    result = comments_services.delete_comment(
        session=db_transaction, user_id=comment.user_id, comment_id=comment.id
    )

    assert result.deleted == 1


def test_only_author_can_delete(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
):
    comment = comment_factory()
    other = user_factory()

    with pytest.raises(NotCommentAuthor):
        comments_services.delete_comment(
            session=db_transaction, user_id=other.id, comment_id=comment.id
        )

    assert len(_all_comments(db_transaction)) == 1


def test_delete_missing_comment(db_transaction: Session):
    with pytest.raises(CommentNotFound):
        comments_services.delete_comment(
            session=db_transaction, user_id=uuid4(), comment_id=uuid4()
        )


def test_get_comments_newest_first_with_author(
    db_transaction: Session,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
):
    author = user_factory(name="Alice")
    older = comment_factory(user_id=author.id, created_at=NOW)
    newer = comment_factory(user_id=author.id, created_at=NOW + timedelta(minutes=1))
    comment_factory(entry_guid="other-entry")

    comments = comments_services.get_comments(session=db_transaction, entry_guid="entry-1")

    assert [c.id for c in comments] == [newer.id, older.id]
    assert comments[0].user is not None
    assert comments[0].user.user_id == author.id
    assert comments[0].user.name == "Alice"


def test_batch_get_comments_keeps_request_order(
    db_transaction: Session, comment_factory: Callable[..., Comment]
):
    a = comment_factory(entry_guid="a")
    b1 = comment_factory(entry_guid="b", created_at=NOW)
    b2 = comment_factory(entry_guid="b", created_at=NOW + timedelta(seconds=5))

    batches = comments_services.batch_get_comments(
        session=db_transaction, entry_guids=["b", "missing", "a", "b"]
    )

    assert [[c.id for c in batch] for batch in batches] == [
        [b2.id, b1.id],
        [],
        [a.id],
        [b2.id, b1.id],
    ]


def test_get_comment_replies_oldest_first(
    db_transaction: Session, comment_factory: Callable[..., Comment]
):
    root = comment_factory()
    late = comment_factory(parent_id=root.id, created_at=NOW + timedelta(minutes=2))
    early = comment_factory(parent_id=root.id, created_at=NOW + timedelta(minutes=1))
    comment_factory(parent_id=late.id)

    replies = comments_services.get_comment_replies(
        session=db_transaction, comment_id=root.id
    )

    assert [r.id for r in replies] == [early.id, late.id]
