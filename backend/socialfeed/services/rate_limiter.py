import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from logging import getLogger

from sqlmodel import Session

from socialfeed.core.rate_limits import RATE_LIMITS, RateLimitConfig, get_rate_limit
from socialfeed.crud import rate_limit as rate_limit_crud
from socialfeed.exceptions.rate_limit_exceptions import RateLimitExceeded
from socialfeed.utils import now_utc_naive

logger = getLogger(__name__)

EPOCH = datetime(1970, 1, 1)
_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class RateLimitResult:
    ok: bool
    # Seconds until the request would succeed, only set when ok is False
    retry_after: float | None = None


def _aligned_window_start(now: datetime, config: RateLimitConfig) -> datetime:
    elapsed = (now - EPOCH) // _MICROSECOND
    period = config.period // _MICROSECOND
    return EPOCH + timedelta(microseconds=elapsed - elapsed % period)


def _current_tokens(
    *,
    value: int,
    window_start: datetime,
    now: datetime,
    config: RateLimitConfig,
) -> tuple[int, datetime]:
    """
    Advance a stored window to the one containing ``now``, adding ``rate``
    tokens per elapsed period up to ``capacity``.
    """
    elapsed_windows = (now - window_start) // config.period
    if elapsed_windows > 0:
        value = min(config.capacity, value + elapsed_windows * config.rate)
        window_start = window_start + elapsed_windows * config.period
    return value, window_start


def _evaluate(
    *,
    value: int,
    window_start: datetime,
    count: int,
    now: datetime,
    config: RateLimitConfig,
) -> RateLimitResult:
    if count <= value:
        return RateLimitResult(ok=True)
    windows_needed = math.ceil((count - value) / config.rate)
    retry_at = window_start + windows_needed * config.period
    return RateLimitResult(ok=False, retry_after=(retry_at - now).total_seconds())


def _load(
    *,
    session: Session,
    key: str,
    config: RateLimitConfig,
    count: int,
    now: datetime,
    for_update: bool,
):
    if count < 1:
        raise ValueError("count must be at least 1")
    if count > config.capacity:
        raise ValueError(
            f"Requested {count} tokens from {config.name}, capacity is {config.capacity}"
        )
    state = rate_limit_crud.get_state(
        session=session, name=config.name, key=key, for_update=for_update
    )
    if state is None and for_update:
        # No row to lock yet: create a full one, then lock whichever row won
        rate_limit_crud.insert_state_if_missing(
            session=session,
            name=config.name,
            key=key,
            value=config.capacity,
            window_start=_aligned_window_start(now, config),
        )
        state = rate_limit_crud.get_state(
            session=session, name=config.name, key=key, for_update=True
        )
    if state is None:
        value, window_start = config.capacity, _aligned_window_start(now, config)
    else:
        value, window_start = _current_tokens(
            value=state.value,
            window_start=state.window_start,
            now=now,
            config=config,
        )
    return state, value, window_start


def limit(
    *,
    session: Session,
    key: str,
    name: str,
    count: int = 1,
    now: datetime | None = None,
) -> RateLimitResult:
    """
    Consume ``count`` tokens from limiter ``name`` for ``key``.

    The state row is locked for the rest of the transaction. A refusal does
    not write anything. The caller owns the transaction: consumed tokens are
    only persisted when the caller commits.

    Parameters:
        session (Session): Database session.
        key (str): What is being limited, usually the acting user's id.
        name (str): Limiter name from the registry.
        count (int): Tokens to consume.
        now (datetime | None): Current time, defaults to now in UTC.
    Returns:
        RateLimitResult: ``ok`` and, on refusal, ``retry_after`` in seconds.
    Raises:
        ValueError: If the limiter is unknown or ``count`` exceeds its capacity.
    """
    config = get_rate_limit(name)
    now = now or now_utc_naive()
    state, value, window_start = _load(
        session=session, key=key, config=config, count=count, now=now, for_update=True
    )
    result = _evaluate(
        value=value, window_start=window_start, count=count, now=now, config=config
    )
    if not result.ok:
        return result

    rate_limit_crud.update_state(
        session=session,
        state=state,
        value=value - count,
        window_start=window_start,
    )
    return result


def check(
    *,
    session: Session,
    key: str,
    name: str,
    count: int = 1,
    now: datetime | None = None,
) -> RateLimitResult:
    """
    Same as :func:`limit` but never consumes tokens.
    """
    config = get_rate_limit(name)
    now = now or now_utc_naive()
    _, value, window_start = _load(
        session=session, key=key, config=config, count=count, now=now, for_update=False
    )
    return _evaluate(
        value=value, window_start=window_start, count=count, now=now, config=config
    )


def enforce(
    *,
    session: Session,
    key: str,
    names: Iterable[str],
    now: datetime | None = None,
) -> None:
    """
    Consume one token from each limiter in ``names``, in order.

    Raises:
        RateLimitExceeded: The tier-specific error of the first refusing limiter.
            Tokens taken from earlier tiers are undone when the caller rolls back.
    """
    now = now or now_utc_naive()
    for name in names:
        result = limit(session=session, key=key, name=name, now=now)
        if not result.ok:
            config = get_rate_limit(name)
            logger.warning(
                "Rate limit %s refused key %s, retry after %.1fs",
                name,
                key,
                result.retry_after,
            )
            raise RateLimitExceeded.for_limit(config, result.retry_after or 0.0)


def prune_expired_states(*, session: Session, now: datetime | None = None) -> int:
    """
    Delete limiter states that would have refilled to capacity by now.
    A missing row is equivalent to a full bucket, so this never changes a decision.

    Returns:
        int: The number of deleted rows.
    """
    now = now or now_utc_naive()
    deleted = 0
    for config in RATE_LIMITS.values():
        windows_to_full = math.ceil(config.capacity / config.rate)
        cutoff = now - windows_to_full * config.period
        deleted += rate_limit_crud.delete_states_before(
            session=session, name=config.name, window_start_before=cutoff
        )
    session.commit()
    logger.info("Pruned %d expired rate limiter states", deleted)
    return deleted
