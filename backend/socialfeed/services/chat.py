import math
from datetime import datetime
from logging import getLogger
from uuid import UUID

from sqlmodel import Session

from socialfeed.core.rate_limits import get_rate_limit
from socialfeed.exceptions.base import AppError
from socialfeed.schemas.chat import ChatMessageIn, ChatMessageResult, RateLimitStatus
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive, strip_control_characters

logger = getLogger(__name__)

CHAT_LIMIT = "chat"


def send_chat_message(
    *,
    session: Session,
    user_id: UUID,
    message_in: ChatMessageIn,
    now: datetime | None = None,
) -> ChatMessageResult:
    """
    Accept a chat message if the user still has daily quota left.
    Running out of quota is a normal result, not an error.
    """
    now = now or now_utc_naive()
    try:
        result = rate_limiter.limit(
            session=session, key=str(user_id), name=CHAT_LIMIT, now=now
        )
        if not result.ok:
            session.rollback()
            return ChatMessageResult(
                limited=True,
                retry_after_ms=math.ceil((result.retry_after or 0.0) * 1000),
                remaining=0,
            )
        session.commit()
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info(
        "Chat message from %s via %s: %s",
        user_id,
        message_in.active_button,
        strip_control_characters(message_in.message)[:200],
    )
    return ChatMessageResult(
        limited=False, success=True, message="Message sent successfully"
    )


def get_rate_limit_status(
    *,
    session: Session,
    user_id: UUID | None,
    now: datetime | None = None,
) -> RateLimitStatus:
    """
    Find how much of the daily chat quota is left without storing a counter.
    Binary searches the largest token count a dry-run check would grant.
    """
    config = get_rate_limit(CHAT_LIMIT)
    if user_id is None:
        return RateLimitStatus(remaining=config.capacity, used=0)

    now = now or now_utc_naive()
    key = str(user_id)

    def fits(count: int) -> bool:
        return rate_limiter.check(
            session=session, key=key, name=CHAT_LIMIT, count=count, now=now
        ).ok

    low, high = 0, config.capacity
    while low < high:
        middle = (low + high + 1) // 2
        if fits(middle):
            low = middle
        else:
            high = middle - 1
    remaining = low
    return RateLimitStatus(remaining=remaining, used=config.capacity - remaining)
