from enum import Enum, unique


@unique
class FriendshipStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


@unique
class FriendshipDirection(str, Enum):
    SENT = "sent"
    RECEIVED = "received"


@unique
class RelationStatus(str, Enum):
    """Friendship state as seen by the current user."""

    SELF = "self"
    PENDING = "pending"
    ACCEPTED = "accepted"
    NONE = "none"


@unique
class FollowAction(str, Enum):
    FOLLOWED = "followed"
    UNFOLLOWED = "unfollowed"


@unique
class RetweetAction(str, Enum):
    RETWEETED = "retweeted"
    UNRETWEETED = "unretweeted"


@unique
class BookmarkAction(str, Enum):
    BOOKMARKED = "bookmarked"
    UNBOOKMARKED = "unbookmarked"


@unique
class NotificationType(str, Enum):
    FRIEND_REQUEST = "friend_request"
    FRIEND_ACCEPTED = "friend_accepted"
    FRIEND_YOU_ACCEPTED = "friend_you_accepted"


@unique
class ReportReason(str, Enum):
    SPAM = "spam/promo"
    INAPPROPRIATE = "inappropriate/harmful"
    INTELLECTUAL = "intellectual"
    OTHER = "other"


@unique
class SubmissionType(str, Enum):
    PODCAST = "podcast"
    NEWSLETTER = "newsletter"
