import uuid

from fastapi import APIRouter, Query

from socialfeed.api.deps import CurrentUser, OptionalCurrentUser, SessionDep
from socialfeed.models.entry import EntryCreate
from socialfeed.schemas.entry import (
    RetweetPublic,
    RetweetResult,
    RetweetStatus,
    UnretweetResult,
)
from socialfeed.services import retweets as retweets_service

router = APIRouter(prefix="/retweets", tags=["retweets"])


@router.post("/", response_model=RetweetResult)
def retweet(
    *, session: SessionDep, current_user: CurrentUser, entry: EntryCreate
) -> RetweetResult:
    return retweets_service.retweet(
        session=session, user_id=current_user.id, entry=entry
    )


@router.delete("/", response_model=UnretweetResult)
def unretweet(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    entry_guid: str = Query(..., min_length=1),
) -> UnretweetResult:
    return retweets_service.unretweet(
        session=session, user_id=current_user.id, entry_guid=entry_guid
    )


@router.get("/status", response_model=RetweetStatus)
def get_retweet_status(
    *,
    session: SessionDep,
    current_user: OptionalCurrentUser,
    entry_guid: str = Query(..., min_length=1),
) -> RetweetStatus:
    return retweets_service.get_retweet_status(
        session=session,
        user_id=current_user.id if current_user else None,
        entry_guid=entry_guid,
    )


@router.get("/counts", response_model=dict[str, RetweetStatus])
def batch_get_retweet_counts(
    *,
    session: SessionDep,
    current_user: OptionalCurrentUser,
    entry_guids: list[str] = Query([]),
) -> dict[str, RetweetStatus]:
    return retweets_service.batch_get_retweet_counts(
        session=session,
        user_id=current_user.id if current_user else None,
        entry_guids=entry_guids,
    )


@router.get("/users/{user_id}", response_model=list[RetweetPublic])
def get_user_retweets(
    *,
    session: SessionDep,
    user_id: uuid.UUID,
    limit: int = Query(50, ge=1, le=100),
) -> list[RetweetPublic]:
    return retweets_service.get_user_retweets(
        session=session, user_id=user_id, limit=limit
    )
