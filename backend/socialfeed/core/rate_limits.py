from dataclasses import dataclass
from datetime import timedelta
from enum import Enum, unique

__all__ = [
    "RateLimitConfig",
    "RateLimitTier",
    "RATE_LIMITS",
    "FOLLOWING_TIERS",
    "FRIENDS_TIERS",
    "COMMENTS_TIERS",
    "COMMENT_LIKES_TIERS",
    "RETWEETS_TIERS",
    "LIKES_TIERS",
    "get_rate_limit",
]

SECOND = timedelta(seconds=1)
MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)


@unique
class RateLimitTier(str, Enum):
    BURST = "burst"
    HOURLY = "hourly"
    DAILY = "daily"


@dataclass(frozen=True)
class RateLimitConfig:
    """
    A fixed-window limiter.

    ``rate`` tokens are added at every window boundary, up to ``capacity``.
    Windows are aligned to multiples of ``period`` since the epoch.
    """

    name: str
    rate: int
    capacity: int
    period: timedelta
    tier: RateLimitTier
    action: str

    @property
    def period_seconds(self) -> float:
        return self.period.total_seconds()


def _limiter(
    name: str, rate: int, period: timedelta, tier: RateLimitTier, action: str
) -> RateLimitConfig:
    return RateLimitConfig(
        name=name, rate=rate, capacity=rate, period=period, tier=tier, action=action
    )


RATE_LIMITS: dict[str, RateLimitConfig] = {
    config.name: config
    for config in (
        # Single-tier limits
        _limiter("chat", 50, DAY, RateLimitTier.DAILY, "chat messages"),
        _limiter("profileUpdate", 3, DAY, RateLimitTier.DAILY, "profile updates"),
        _limiter("reportsDaily", 5, DAY, RateLimitTier.DAILY, "reports"),
        _limiter("submissionsDaily", 3, DAY, RateLimitTier.DAILY, "submissions"),
        # Likes
        _limiter("likesBurst", 5, 30 * SECOND, RateLimitTier.BURST, "likes"),
        _limiter("likesHourly", 50, HOUR, RateLimitTier.HOURLY, "likes"),
        _limiter("likesDaily", 200, DAY, RateLimitTier.DAILY, "likes"),
        # Bookmarks
        _limiter("bookmarksBurst", 5, 30 * SECOND, RateLimitTier.BURST, "bookmarks"),
        _limiter("bookmarksHourly", 50, HOUR, RateLimitTier.HOURLY, "bookmarks"),
        _limiter("bookmarksDaily", 200, DAY, RateLimitTier.DAILY, "bookmarks"),
        # Retweets
        _limiter("retweetsBurst", 3, 30 * SECOND, RateLimitTier.BURST, "retweets"),
        _limiter("retweetsHourly", 25, HOUR, RateLimitTier.HOURLY, "retweets"),
        _limiter("retweetsDaily", 100, DAY, RateLimitTier.DAILY, "retweets"),
        # Following
        _limiter("followingBurst", 10, MINUTE, RateLimitTier.BURST, "follows"),
        _limiter("followingHourly", 50, HOUR, RateLimitTier.HOURLY, "follows"),
        _limiter("followingDaily", 200, DAY, RateLimitTier.DAILY, "follows"),
        # Friend requests
        _limiter("friendsBurst", 10, 2 * MINUTE, RateLimitTier.BURST, "friend requests"),
        _limiter("friendsHourly", 25, HOUR, RateLimitTier.HOURLY, "friend requests"),
        _limiter("friendsDaily", 75, DAY, RateLimitTier.DAILY, "friend requests"),
        # Comments
        _limiter("commentsBurst", 5, 30 * SECOND, RateLimitTier.BURST, "comments"),
        _limiter("commentsHourly", 20, HOUR, RateLimitTier.HOURLY, "comments"),
        _limiter("commentsDaily", 100, DAY, RateLimitTier.DAILY, "comments"),
        # Comment likes
        _limiter("commentLikesBurst", 5, 30 * SECOND, RateLimitTier.BURST, "comment likes"),
        _limiter("commentLikesHourly", 50, HOUR, RateLimitTier.HOURLY, "comment likes"),
        _limiter("commentLikesDaily", 200, DAY, RateLimitTier.DAILY, "comment likes"),
    )
}

# Tier stacks, always checked burst -> hourly -> daily.
FOLLOWING_TIERS = ("followingBurst", "followingHourly", "followingDaily")
FRIENDS_TIERS = ("friendsBurst", "friendsHourly", "friendsDaily")
COMMENTS_TIERS = ("commentsBurst", "commentsHourly", "commentsDaily")
COMMENT_LIKES_TIERS = ("commentLikesBurst", "commentLikesHourly", "commentLikesDaily")
RETWEETS_TIERS = ("retweetsBurst", "retweetsHourly", "retweetsDaily")
LIKES_TIERS = ("likesBurst", "likesHourly", "likesDaily")
BOOKMARKS_TIERS = ("bookmarksBurst", "bookmarksHourly", "bookmarksDaily")


def get_rate_limit(name: str) -> RateLimitConfig:
    try:
        return RATE_LIMITS[name]
    except KeyError:
        raise ValueError(f"Unknown rate limiter: {name}") from None
