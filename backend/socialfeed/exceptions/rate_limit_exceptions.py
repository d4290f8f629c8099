import math

from fastapi import status

from socialfeed.core.rate_limits import RateLimitConfig, RateLimitTier

from .base import AppError


def _format_wait(seconds: float) -> str:
    seconds = max(1, math.ceil(seconds))
    if seconds < 60:
        return f"{seconds} second{'s' if seconds != 1 else ''}"
    minutes = math.ceil(seconds / 60)
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    hours = math.ceil(minutes / 60)
    return f"{hours} hour{'s' if hours != 1 else ''}"


class RateLimitExceeded(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMIT"

    def __init__(self, detail: str, retry_after: float):
        self.retry_after = retry_after
        self.headers = {"Retry-After": str(max(1, math.ceil(retry_after)))}
        super().__init__(detail)

    @classmethod
    def for_limit(
        cls, config: RateLimitConfig, retry_after: float
    ) -> "RateLimitExceeded":
        exc_type = _TIER_EXCEPTIONS[config.tier]
        return exc_type(config.action, retry_after)


class BurstRateLimitExceeded(RateLimitExceeded):
    code = "RATE_LIMIT_BURST"

    def __init__(self, action: str, retry_after: float):
        detail = (
            f"Burst rate limit exceeded: too many {action} in a short time. "
            f"Please wait {_format_wait(retry_after)} and try again."
        )
        super().__init__(detail, retry_after)


class HourlyRateLimitExceeded(RateLimitExceeded):
    code = "RATE_LIMIT_HOURLY"

    def __init__(self, action: str, retry_after: float):
        detail = (
            f"Hourly rate limit exceeded for {action}. "
            f"Please wait {_format_wait(retry_after)} and try again."
        )
        super().__init__(detail, retry_after)


class DailyRateLimitExceeded(RateLimitExceeded):
    code = "RATE_LIMIT_DAILY"

    def __init__(self, action: str, retry_after: float):
        detail = (
            f"Daily rate limit exceeded for {action}. "
            f"Please wait {_format_wait(retry_after)} and try again."
        )
        super().__init__(detail, retry_after)


class CooldownActive(RateLimitExceeded):
    code = "COOLDOWN"

    def __init__(self, retry_after: float):
        detail = (
            "Rate limit: you are doing that too quickly. "
            f"Please wait {_format_wait(retry_after)} and try again."
        )
        super().__init__(detail, retry_after)


_TIER_EXCEPTIONS: dict[RateLimitTier, type[RateLimitExceeded]] = {
    RateLimitTier.BURST: BurstRateLimitExceeded,
    RateLimitTier.HOURLY: HourlyRateLimitExceeded,
    RateLimitTier.DAILY: DailyRateLimitExceeded,
}
