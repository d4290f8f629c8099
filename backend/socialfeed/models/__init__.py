from .user import *
from .auth_schemas import *
from .following import Following
from .friendship import Friendship
from .comment import Comment, CommentLike
from .entry import Bookmark, EntryCreate, Like, Retweet
from .rate_limit import RateLimiterState
from .report import Report, ReportCreate, Submission, SubmissionCreate

__all__ = [
    "User",
    "UserBase",
    "UserCreate",
    "UserRegister",
    "UserUpdateMe",
    "Message",
    "Token",
    "TokenPayload",
    "Following",
    "Friendship",
    "Comment",
    "CommentLike",
    "EntryCreate",
    "Like",
    "Retweet",
    "Bookmark",
    "RateLimiterState",
    "Report",
    "ReportCreate",
    "Submission",
    "SubmissionCreate",
]
