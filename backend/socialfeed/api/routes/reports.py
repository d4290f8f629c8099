from fastapi import APIRouter

from socialfeed.api.deps import CurrentUser, SessionDep
from socialfeed.models.auth_schemas import Message
from socialfeed.models.report import ReportCreate, SubmissionCreate
from socialfeed.services import reports as reports_service

router = APIRouter(tags=["reports"])


@router.post("/reports", response_model=Message)
def create_report(
    *, session: SessionDep, current_user: CurrentUser, report_in: ReportCreate
) -> Message:
    return reports_service.create_report(
        session=session, user_id=current_user.id, report_in=report_in
    )


@router.post("/submissions", response_model=Message)
def create_submission(
    *, session: SessionDep, current_user: CurrentUser, submission_in: SubmissionCreate
) -> Message:
    return reports_service.create_submission(
        session=session, user_id=current_user.id, submission_in=submission_in
    )
