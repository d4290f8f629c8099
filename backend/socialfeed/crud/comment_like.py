from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import Session, col, select

from socialfeed.models.comment import CommentLike


def get_comment_like(
    *,
    session: Session,
    user_id: UUID,
    comment_id: UUID,
) -> CommentLike | None:
    statement = select(CommentLike).where(
        CommentLike.user_id == user_id,
        CommentLike.comment_id == comment_id,
    )
    return session.exec(statement).first()


def create_comment_like(
    *,
    session: Session,
    user_id: UUID,
    comment_id: UUID,
    liked_at: datetime,
) -> CommentLike:
    like = CommentLike(user_id=user_id, comment_id=comment_id, liked_at=liked_at)
    session.add(like)
    session.flush()
    return like


def delete_comment_like(*, session: Session, like: CommentLike) -> None:
    session.delete(like)
    session.flush()


def get_liked_comment_ids(
    *,
    session: Session,
    user_id: UUID,
    comment_ids: list[UUID],
) -> set[UUID]:
    if not comment_ids:
        return set()
    statement = select(CommentLike.comment_id).where(
        CommentLike.user_id == user_id,
        col(CommentLike.comment_id).in_(comment_ids),
    )
    return set(session.exec(statement).all())


def count_likes_by_comment(
    *,
    session: Session,
    comment_ids: list[UUID],
) -> dict[UUID, int]:
    """
    Count likes per comment for all ``comment_ids`` in one grouped query.
    Comments without likes are absent from the result.
    """
    if not comment_ids:
        return {}
    statement = (
        select(CommentLike.comment_id, func.count(col(CommentLike.id)))
        .where(col(CommentLike.comment_id).in_(comment_ids))
        .group_by(col(CommentLike.comment_id))
    )
    return {comment_id: int(count) for comment_id, count in session.exec(statement)}


def delete_likes_for_comments(*, session: Session, comment_ids: list[UUID]) -> None:
    if not comment_ids:
        return
    session.execute(
        delete(CommentLike).where(col(CommentLike.comment_id).in_(comment_ids))
    )
    session.flush()
