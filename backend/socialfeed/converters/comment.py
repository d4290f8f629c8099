from uuid import UUID

from socialfeed.models.comment import Comment
from socialfeed.schemas.comment import CommentPublic
from socialfeed.schemas.user import UserDisplay


def to_public(
    comment: Comment,
    *,
    users: dict[UUID, UserDisplay],
) -> CommentPublic:
    """
    Converts a Comment to a CommentPublic, attaching the author's display data.

    Parameters:
        comment (Comment): The comment to convert.
        users (dict[UUID, UserDisplay]): Lookup map built once per request.
    Returns:
        CommentPublic: The comment with ``user`` set, or None if the author is gone.
    """
    Comment.model_validate(comment)
    return CommentPublic(
        **comment.model_dump(),
        user=users.get(comment.user_id),
    )
