from datetime import datetime
from uuid import UUID

from psycopg.errors import UniqueViolation
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from socialfeed.core.rate_limits import COMMENT_LIKES_TIERS
from socialfeed.crud import comment as comments_crud
from socialfeed.crud import comment_like as comment_likes_crud
from socialfeed.exceptions.base import AlreadyExists, AppError
from socialfeed.exceptions.comment_exceptions import CommentNotFound
from socialfeed.schemas.comment import CommentLikeStatus, CommentLikeStatusWithId
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive


def toggle_comment_like(
    *,
    session: Session,
    user_id: UUID,
    comment_id: UUID,
    now: datetime | None = None,
) -> CommentLikeStatus:
    """
    Like a comment, or remove the like if it is already there.
    Both directions count against the comment-likes limits.

    Raises:
        RateLimitExceeded: If a comment-likes burst/hourly/daily limit is reached.
        CommentNotFound: If the comment does not exist.
        AlreadyExists: If a concurrent like of the same comment won the race.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        rate_limiter.enforce(
            session=session, key=str(user_id), names=COMMENT_LIKES_TIERS, now=now
        )

        comment = comments_crud.get_comment_by_id(session=session, comment_id=comment_id)
        if comment is None:
            raise CommentNotFound(comment_id)

        like = comment_likes_crud.get_comment_like(
            session=session, user_id=user_id, comment_id=comment_id
        )
        if like is None:
            comment_likes_crud.create_comment_like(
                session=session, user_id=user_id, comment_id=comment_id, liked_at=now
            )
            comments_crud.increment_like_count(session=session, comment=comment, delta=1)
            is_liked = True
        else:
            comment_likes_crud.delete_comment_like(session=session, like=like)
            comments_crud.increment_like_count(session=session, comment=comment, delta=-1)
            is_liked = False
        count = comment.like_count
        session.commit()
    except AppError:
        session.rollback()
        raise
    except IntegrityError as e:
        session.rollback()
        if isinstance(e.orig, UniqueViolation):
            raise AlreadyExists("You already liked this comment.") from e
        raise AppError from e
    except Exception as e:
        session.rollback()
        raise AppError from e
    return CommentLikeStatus(is_liked=is_liked, count=count)


def get_comment_like_status(
    *,
    session: Session,
    user_id: UUID | None,
    comment_id: UUID,
) -> CommentLikeStatus:
    comment = comments_crud.get_comment_by_id(session=session, comment_id=comment_id)
    if comment is None:
        raise CommentNotFound(comment_id)
    is_liked = (
        user_id is not None
        and comment_likes_crud.get_comment_like(
            session=session, user_id=user_id, comment_id=comment_id
        )
        is not None
    )
    return CommentLikeStatus(is_liked=is_liked, count=comment.like_count)


def batch_get_comment_likes(
    *,
    session: Session,
    user_id: UUID | None,
    comment_ids: list[UUID],
) -> list[CommentLikeStatusWithId]:
    """
    Like status for many comments using two grouped queries.
    Counts come from the like rows, not the denormalized counter.

    Returns:
        list[CommentLikeStatusWithId]: One record per id, in the order of ``comment_ids``.
    """
    unique_ids = list(dict.fromkeys(comment_ids))
    counts = comment_likes_crud.count_likes_by_comment(
        session=session, comment_ids=unique_ids
    )
    liked: set[UUID] = set()
    if user_id is not None:
        liked = comment_likes_crud.get_liked_comment_ids(
            session=session, user_id=user_id, comment_ids=unique_ids
        )
    return [
        CommentLikeStatusWithId(
            comment_id=comment_id,
            is_liked=comment_id in liked,
            count=counts.get(comment_id, 0),
        )
        for comment_id in comment_ids
    ]
