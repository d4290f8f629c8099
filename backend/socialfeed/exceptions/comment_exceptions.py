from uuid import UUID

from .base import NotAuthorized, NotFound, ValidationFailed

MAX_COMMENT_LENGTH = 500


class CommentNotFound(NotFound):
    def __init__(self, comment_id: UUID):
        detail = f"Comment with id {comment_id} not found."
        super().__init__(detail)


class ParentCommentNotFound(NotFound):
    def __init__(self, parent_id: UUID):
        detail = f"Parent comment with id {parent_id} not found."
        super().__init__(detail)


class EmptyComment(ValidationFailed):
    detail = "Comment cannot be empty."


class CommentTooLong(ValidationFailed):
    detail = f"Comment too long (max {MAX_COMMENT_LENGTH} characters)."


class ParentEntryMismatch(ValidationFailed):
    detail = "Parent comment belongs to a different entry."


class NotCommentAuthor(NotAuthorized):
    detail = "Unauthorized: you can only delete your own comments."
