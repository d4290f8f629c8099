from datetime import datetime
from logging import getLogger
from uuid import UUID

from sqlmodel import Session

from socialfeed.converters import comment as comment_converters
from socialfeed.converters import user as user_converters
from socialfeed.core.rate_limits import COMMENTS_TIERS
from socialfeed.crud import comment as comments_crud
from socialfeed.crud import comment_like as comment_likes_crud
from socialfeed.crud import user as users_crud
from socialfeed.exceptions.base import AppError
from socialfeed.exceptions.comment_exceptions import (
    MAX_COMMENT_LENGTH,
    CommentNotFound,
    CommentTooLong,
    EmptyComment,
    NotCommentAuthor,
    ParentCommentNotFound,
    ParentEntryMismatch,
)
from socialfeed.exceptions.user_exceptions import UserNotFound
from socialfeed.models.comment import Comment
from socialfeed.schemas.comment import (
    CommentCreate,
    CommentCreated,
    CommentDeleted,
    CommentPublic,
)
from socialfeed.schemas.user import UserDisplay
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive, strip_control_characters

logger = getLogger(__name__)


def _clean_content(content: str) -> str:
    content = content.strip()
    if len(content) > MAX_COMMENT_LENGTH:
        raise CommentTooLong()
    content = strip_control_characters(content).strip()
    if not content:
        raise EmptyComment()
    return content


def add_comment(
    *,
    session: Session,
    user_id: UUID,
    comment_in: CommentCreate,
    now: datetime | None = None,
) -> CommentCreated:
    """
    Add a comment to an entry, or a reply to another comment on the same entry.

    Parameters:
        session (Session): Database session.
        user_id (UUID): The author.
        comment_in (CommentCreate): Entry, content and optional parent.
        now (datetime | None): Current time, defaults to now in UTC.
    Returns:
        CommentCreated: The id of the new comment.
    Raises:
        EmptyComment: If the content is blank after trimming.
        CommentTooLong: If the trimmed content exceeds the maximum length.
        RateLimitExceeded: If a comments burst/hourly/daily limit is reached.
        ParentCommentNotFound: If ``parent_id`` does not exist.
        ParentEntryMismatch: If the parent is on another entry.
        AppError: For any other (unexpected) errors.
    """
    content = _clean_content(comment_in.content)
    now = now or now_utc_naive()
    try:
        rate_limiter.enforce(
            session=session, key=str(user_id), names=COMMENTS_TIERS, now=now
        )

        if comment_in.parent_id is not None:
            parent = comments_crud.get_comment_by_id(
                session=session, comment_id=comment_in.parent_id
            )
            if parent is None:
                raise ParentCommentNotFound(comment_in.parent_id)
            if parent.entry_guid != comment_in.entry_guid:
                raise ParentEntryMismatch()

        user = users_crud.get_user_by_id(session=session, user_id=user_id)
        if user is None:
            raise UserNotFound(user_id)

        comment = comments_crud.create_comment(
            session=session,
            user_id=user_id,
            username=user.username,
            entry_guid=comment_in.entry_guid,
            feed_url=comment_in.feed_url,
            content=content,
            parent_id=comment_in.parent_id,
            created_at=now,
        )
        comment_id = comment.id
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e
    return CommentCreated(comment_id=comment_id)


def _collect_subtree(*, session: Session, root_id: UUID) -> list[UUID]:
    """
    Walk the reply tree under ``root_id`` with an explicit stack.
    The returned ids are in post-order, so every reply precedes its parent.
    """
    order: list[UUID] = []
    stack: list[tuple[UUID, bool]] = [(root_id, False)]
    while stack:
        comment_id, expanded = stack.pop()
        if expanded:
            order.append(comment_id)
            continue
        stack.append((comment_id, True))
        for reply_id in comments_crud.get_reply_ids(session=session, parent_id=comment_id):
            stack.append((reply_id, False))
    return order


def delete_comment(
    *,
    session: Session,
    user_id: UUID,
    comment_id: UUID,
) -> CommentDeleted:
    """
    Delete a comment together with every reply below it and their likes.
    Only the author may delete a comment, the replies go regardless of who wrote them.

    Raises:
        CommentNotFound: If the comment does not exist.
        NotCommentAuthor: If the user is not the author.
        AppError: For any other (unexpected) errors.
    """
    try:
        comment = comments_crud.get_comment_by_id(session=session, comment_id=comment_id)
        if comment is None:
            raise CommentNotFound(comment_id)
        if comment.user_id != user_id:
            raise NotCommentAuthor()

        subtree = _collect_subtree(session=session, root_id=comment_id)
        comment_likes_crud.delete_likes_for_comments(session=session, comment_ids=subtree)
        deleted = comments_crud.delete_comments(session=session, comment_ids=subtree)
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("User %s deleted comment %s and %d replies", user_id, comment_id, deleted - 1)
    return CommentDeleted(deleted=deleted)


def _user_map(*, session: Session, comments: list[Comment]) -> dict[UUID, UserDisplay]:
    user_ids = list({comment.user_id for comment in comments})
    return {
        user.id: user_converters.to_display(user)
        for user in users_crud.get_users_by_ids(session=session, user_ids=user_ids)
    }


def get_comments(*, session: Session, entry_guid: str) -> list[CommentPublic]:
    comments = comments_crud.get_comments_for_entry(session=session, entry_guid=entry_guid)
    users = _user_map(session=session, comments=comments)
    return [comment_converters.to_public(c, users=users) for c in comments]


def batch_get_comments(
    *,
    session: Session,
    entry_guids: list[str],
) -> list[list[CommentPublic]]:
    """
    Get the comments of many entries with one comment query and one user lookup.

    Returns:
        list[list[CommentPublic]]: Comments per entry, in the order of ``entry_guids``,
            each list newest first.
    """
    comments = comments_crud.get_comments_for_entries(
        session=session, entry_guids=list(dict.fromkeys(entry_guids))
    )
    users = _user_map(session=session, comments=comments)

    by_entry: dict[str, list[CommentPublic]] = {}
    for comment in comments:
        by_entry.setdefault(comment.entry_guid, []).append(
            comment_converters.to_public(comment, users=users)
        )
    return [list(by_entry.get(guid, [])) for guid in entry_guids]


def get_comment_replies(*, session: Session, comment_id: UUID) -> list[CommentPublic]:
    replies = comments_crud.get_replies(session=session, parent_id=comment_id)
    users = _user_map(session=session, comments=replies)
    return [comment_converters.to_public(c, users=users) for c in replies]
