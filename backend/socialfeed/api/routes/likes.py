import uuid

from fastapi import APIRouter, Query

from socialfeed.api.deps import CurrentUser, OptionalCurrentUser, SessionDep
from socialfeed.models.entry import EntryCreate
from socialfeed.schemas.entry import LikeResult, LikeStatus, UserLikesPage
from socialfeed.services import likes as likes_service

router = APIRouter(prefix="/likes", tags=["likes"])


@router.post("/", response_model=LikeResult)
def like(
    *, session: SessionDep, current_user: CurrentUser, entry: EntryCreate
) -> LikeResult:
    return likes_service.like(session=session, user_id=current_user.id, entry=entry)


@router.delete("/", response_model=LikeResult)
def unlike(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    entry_guid: str = Query(..., min_length=1),
) -> LikeResult:
    return likes_service.unlike(
        session=session, user_id=current_user.id, entry_guid=entry_guid
    )


@router.get("/status", response_model=LikeStatus)
def get_like_status(
    *,
    session: SessionDep,
    current_user: OptionalCurrentUser,
    entry_guid: str = Query(..., min_length=1),
) -> LikeStatus:
    return likes_service.get_like_status(
        session=session,
        user_id=current_user.id if current_user else None,
        entry_guid=entry_guid,
    )


@router.get("/count", response_model=int)
def get_like_count(
    *, session: SessionDep, entry_guid: str = Query(..., min_length=1)
) -> int:
    return likes_service.get_like_count(session=session, entry_guid=entry_guid)


@router.get("/users/{user_id}", response_model=UserLikesPage)
def get_user_likes(
    *,
    session: SessionDep,
    user_id: uuid.UUID,
    limit: int = Query(30, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> UserLikesPage:
    return likes_service.get_user_likes(
        session=session, user_id=user_id, limit=limit, offset=offset
    )
