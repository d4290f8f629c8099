from datetime import datetime
from logging import getLogger

from sqlmodel import Session

from socialfeed.converters import user as user_converters
from socialfeed.crud import user as users_crud
from socialfeed.exceptions.base import AppError
from socialfeed.models.user import User, UserUpdateMe
from socialfeed.schemas.user import UserMePublic
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive, strip_control_characters

logger = getLogger(__name__)

PROFILE_UPDATE_LIMIT = "profileUpdate"


def update_profile(
    *,
    session: Session,
    user_in: UserUpdateMe,
    current_user: User,
    now: datetime | None = None,
) -> UserMePublic:
    """
    Update the current user's profile fields.

    Raises:
        DailyRateLimitExceeded: If the user already updated their profile too often today.
        AppError: For any other (unexpected) errors.
    """
    if user_in.name is not None:
        user_in.name = strip_control_characters(user_in.name).strip() or None
    if user_in.bio is not None:
        user_in.bio = strip_control_characters(user_in.bio).strip() or None

    now = now or now_utc_naive()
    try:
        rate_limiter.enforce(
            session=session,
            key=str(current_user.id),
            names=(PROFILE_UPDATE_LIMIT,),
            now=now,
        )
        users_crud.update_user(session=session, db_user=current_user, user_in=user_in)
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("User %s updated their profile", current_user.id)
    return user_converters.to_me_public(current_user)
