from datetime import datetime
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import Session, col, select

from socialfeed.models.comment import Comment


def get_comment_by_id(*, session: Session, comment_id: UUID) -> Comment | None:
    return session.get(Comment, comment_id)


def create_comment(
    *,
    session: Session,
    user_id: UUID,
    username: str,
    entry_guid: str,
    feed_url: str,
    content: str,
    parent_id: UUID | None,
    created_at: datetime,
) -> Comment:
    comment = Comment(
        user_id=user_id,
        username=username,
        entry_guid=entry_guid,
        feed_url=feed_url,
        content=content,
        parent_id=parent_id,
        created_at=created_at,
    )
    session.add(comment)
    session.flush()
    return comment


def get_comments_for_entry(*, session: Session, entry_guid: str) -> list[Comment]:
    """
    Get every comment on an entry, newest first.
    """
    statement = (
        select(Comment)
        .where(Comment.entry_guid == entry_guid)
        .order_by(col(Comment.created_at).desc())
    )
    return list(session.exec(statement).all())


def get_comments_for_entries(
    *, session: Session, entry_guids: list[str]
) -> list[Comment]:
    if not entry_guids:
        return []
    statement = (
        select(Comment)
        .where(col(Comment.entry_guid).in_(entry_guids))
        .order_by(col(Comment.created_at).desc())
    )
    return list(session.exec(statement).all())


def get_replies(*, session: Session, parent_id: UUID) -> list[Comment]:
    """
    Get the direct replies to a comment, oldest first.
    """
    statement = (
        select(Comment)
        .where(Comment.parent_id == parent_id)
        .order_by(col(Comment.created_at).asc())
    )
    return list(session.exec(statement).all())


def get_reply_ids(*, session: Session, parent_id: UUID) -> list[UUID]:
    statement = select(Comment.id).where(Comment.parent_id == parent_id)
    return list(session.exec(statement).all())


def delete_comments(*, session: Session, comment_ids: list[UUID]) -> int:
    """
    Delete the given comments. Callers must order ``comment_ids`` so that
    replies come before their parents.

    Returns:
        int: The number of deleted rows.
    """
    deleted = 0
    for comment_id in comment_ids:
        result = session.execute(delete(Comment).where(col(Comment.id) == comment_id))
        deleted += result.rowcount or 0
    session.flush()
    return deleted


def increment_like_count(*, session: Session, comment: Comment, delta: int) -> Comment:
    comment.like_count = max(0, comment.like_count + delta)
    session.add(comment)
    session.flush()
    return comment
