from datetime import datetime, timedelta
from logging import getLogger
from uuid import UUID

from psycopg.errors import UniqueViolation
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from socialfeed.core.config import settings
from socialfeed.core.enums import FollowAction
from socialfeed.core.rate_limits import FOLLOWING_TIERS, get_rate_limit
from socialfeed.crud import following as following_crud
from socialfeed.crud import user as users_crud
from socialfeed.exceptions.base import AppError
from socialfeed.exceptions.rate_limit_exceptions import (
    CooldownActive,
    RateLimitExceeded,
)
from socialfeed.exceptions.user_exceptions import UserNotFound
from socialfeed.schemas.following import FollowResult, UnfollowResult
from socialfeed.utils import chunked, now_utc_naive

logger = getLogger(__name__)


def _check_global_cooldown(*, session: Session, user_id: UUID, now: datetime) -> None:
    latest = following_crud.get_latest_following(session=session, user_id=user_id)
    if latest is None:
        return
    cooldown = timedelta(seconds=settings.FOLLOW_GLOBAL_COOLDOWN_SECONDS)
    elapsed = now - latest.followed_at
    if elapsed < cooldown:
        raise CooldownActive((cooldown - elapsed).total_seconds())


def _check_post_cooldown(*, followed_at: datetime, now: datetime) -> None:
    cooldown = timedelta(seconds=settings.FOLLOW_POST_COOLDOWN_SECONDS)
    elapsed = now - followed_at
    if elapsed < cooldown:
        raise CooldownActive((cooldown - elapsed).total_seconds())


def _check_following_windows(*, session: Session, user_id: UUID, now: datetime) -> None:
    # Counts rows in the following table itself rather than limiter state.
    for name in FOLLOWING_TIERS:
        config = get_rate_limit(name)
        count, oldest = following_crud.count_followings_since(
            session=session, user_id=user_id, since=now - config.period
        )
        if count >= config.rate:
            retry_after = (
                (oldest + config.period - now).total_seconds() if oldest else 0.0
            )
            raise RateLimitExceeded.for_limit(config, retry_after)


def follow(
    *,
    session: Session,
    user_id: UUID,
    post_id: str,
    feed_url: str,
    rss_key: str,
    now: datetime | None = None,
) -> FollowResult:
    """
    Follow the feed behind a post.
    Following a post that is already followed is a no-op once the per-post
    cooldown has passed.

    Raises:
        CooldownActive: If the user wrote a following row too recently.
        RateLimitExceeded: If a burst/hourly/daily following window is full.
        UserNotFound: If the user does not exist.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        _check_global_cooldown(session=session, user_id=user_id, now=now)

        existing = following_crud.get_following(
            session=session, user_id=user_id, post_id=post_id
        )
        if existing is not None:
            _check_post_cooldown(followed_at=existing.followed_at, now=now)
            return FollowResult(
                success=True, feed_url=existing.feed_url, action=FollowAction.FOLLOWED
            )

        _check_following_windows(session=session, user_id=user_id, now=now)

        user = users_crud.get_user_by_id(session=session, user_id=user_id)
        if user is None:
            raise UserNotFound(user_id)

        following_crud.create_following(
            session=session,
            user_id=user_id,
            post_id=post_id,
            feed_url=feed_url,
            followed_at=now,
        )
        if rss_key not in user.rss_keys:
            users_crud.set_rss_keys(
                session=session, db_user=user, rss_keys=[*user.rss_keys, rss_key]
            )
        session.commit()
    except AppError:
        session.rollback()
        raise
    except IntegrityError as e:
        # A concurrent follow of the same post won the race
        session.rollback()
        if isinstance(e.orig, UniqueViolation):
            raise CooldownActive(settings.FOLLOW_POST_COOLDOWN_SECONDS) from e
        raise AppError from e
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("User %s followed post %s", user_id, post_id)
    return FollowResult(success=True, feed_url=feed_url, action=FollowAction.FOLLOWED)


def unfollow(
    *,
    session: Session,
    user_id: UUID,
    post_id: str,
    rss_key: str,
    now: datetime | None = None,
) -> UnfollowResult:
    """
    Stop following a post.
    The RSS key is only removed from the user when no other followed post
    shares the same feed.

    Raises:
        CooldownActive: If the user wrote a following row too recently.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        _check_global_cooldown(session=session, user_id=user_id, now=now)

        existing = following_crud.get_following(
            session=session, user_id=user_id, post_id=post_id
        )
        if existing is None:
            return UnfollowResult(success=False, error="Not following this post.")

        _check_post_cooldown(followed_at=existing.followed_at, now=now)

        feed_url = existing.feed_url
        following_crud.delete_following(session=session, following=existing)

        still_needed = following_crud.has_following_for_feed(
            session=session, user_id=user_id, feed_url=feed_url
        )
        user = users_crud.get_user_by_id(session=session, user_id=user_id)
        if user is not None and not still_needed and rss_key in user.rss_keys:
            users_crud.set_rss_keys(
                session=session,
                db_user=user,
                rss_keys=[key for key in user.rss_keys if key != rss_key],
            )
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("User %s unfollowed post %s", user_id, post_id)
    return UnfollowResult(success=True, action=FollowAction.UNFOLLOWED)


def is_following(*, session: Session, user_id: UUID | None, post_id: str) -> bool:
    if user_id is None:
        return False
    return (
        following_crud.get_following(session=session, user_id=user_id, post_id=post_id)
        is not None
    )


def get_follow_states(
    *,
    session: Session,
    user_id: UUID | None,
    post_ids: list[str],
) -> list[bool]:
    """
    Check which posts the user follows.

    Parameters:
        session (Session): Database session.
        user_id (UUID | None): The current user, None when not logged in.
        post_ids (list[str]): Posts to check.
    Returns:
        list[bool]: One flag per post, in the order of ``post_ids``.
    """
    if user_id is None:
        return [False] * len(post_ids)

    followed: set[str] = set()
    for chunk in chunked(list(dict.fromkeys(post_ids)), settings.FOLLOW_STATES_CHUNK_SIZE):
        followed |= following_crud.get_followed_post_ids(
            session=session, user_id=user_id, post_ids=chunk
        )
    return [post_id in followed for post_id in post_ids]


def get_following_count(*, session: Session, post_id: str) -> int:
    return following_crud.count_followers(session=session, post_id=post_id)
