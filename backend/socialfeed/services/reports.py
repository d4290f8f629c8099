from datetime import datetime
from logging import getLogger
from uuid import UUID

from sqlmodel import Session

from socialfeed.crud import report as reports_crud
from socialfeed.exceptions.base import AppError
from socialfeed.models.auth_schemas import Message
from socialfeed.models.report import ReportCreate, SubmissionCreate
from socialfeed.services import rate_limiter
from socialfeed.utils import now_utc_naive, strip_control_characters

logger = getLogger(__name__)

REPORTS_LIMIT = "reportsDaily"
SUBMISSIONS_LIMIT = "submissionsDaily"


def create_report(
    *,
    session: Session,
    user_id: UUID,
    report_in: ReportCreate,
    now: datetime | None = None,
) -> Message:
    """
    Store a report about a post.

    Raises:
        DailyRateLimitExceeded: If the user filed too many reports today.
        AppError: For any other (unexpected) errors.
    """
    report_in.description = strip_control_characters(report_in.description)
    now = now or now_utc_naive()
    try:
        rate_limiter.enforce(
            session=session, key=str(user_id), names=(REPORTS_LIMIT,), now=now
        )
        report = reports_crud.create_report(
            session=session, user_id=user_id, report_in=report_in, created_at=now
        )
        report_id = report.id
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info(
        "Report %s filed by %s on %s (%s)",
        report_id,
        user_id,
        report_in.post_slug,
        report_in.reason.value,
    )
    return Message(message="Report submitted successfully")


def create_submission(
    *,
    session: Session,
    user_id: UUID,
    submission_in: SubmissionCreate,
    now: datetime | None = None,
) -> Message:
    """
    Store a podcast or newsletter suggestion.

    Raises:
        DailyRateLimitExceeded: If the user sent too many submissions today.
        AppError: For any other (unexpected) errors.
    """
    now = now or now_utc_naive()
    try:
        rate_limiter.enforce(
            session=session, key=str(user_id), names=(SUBMISSIONS_LIMIT,), now=now
        )
        submission = reports_crud.create_submission(
            session=session,
            user_id=user_id,
            submission_in=submission_in,
            created_at=now,
        )
        submission_id = submission.id
        session.commit()
    except AppError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        raise AppError from e

    logger.info("Submission %s sent by %s", submission_id, user_id)
    return Message(message="Submission received successfully")
