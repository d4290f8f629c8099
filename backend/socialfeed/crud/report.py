from datetime import datetime
from uuid import UUID

from sqlmodel import Session

from socialfeed.models.report import Report, ReportCreate, Submission, SubmissionCreate


def create_report(
    *,
    session: Session,
    user_id: UUID,
    report_in: ReportCreate,
    created_at: datetime,
) -> Report:
    report = Report.model_validate(
        report_in, update={"user_id": user_id, "created_at": created_at}
    )
    session.add(report)
    session.flush()
    return report


def create_submission(
    *,
    session: Session,
    user_id: UUID,
    submission_in: SubmissionCreate,
    created_at: datetime,
) -> Submission:
    submission = Submission.model_validate(
        submission_in,
        update={
            "user_id": user_id,
            "rss_feed": str(submission_in.rss_feed),
            "created_at": created_at,
        },
    )
    session.add(submission)
    session.flush()
    return submission
