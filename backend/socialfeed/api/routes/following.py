from fastapi import APIRouter, Query

from socialfeed.api.deps import CurrentUser, OptionalCurrentUser, SessionDep
from socialfeed.schemas.following import FollowCreate, FollowResult, UnfollowResult
from socialfeed.services import following as following_service

router = APIRouter(prefix="/following", tags=["following"])


@router.get("/states", response_model=list[bool])
def get_follow_states(
    *,
    session: SessionDep,
    current_user: OptionalCurrentUser,
    post_ids: list[str] = Query([]),
) -> list[bool]:
    return following_service.get_follow_states(
        session=session,
        user_id=current_user.id if current_user else None,
        post_ids=post_ids,
    )


@router.post("/{post_id}", response_model=FollowResult)
def follow(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    post_id: str,
    follow_in: FollowCreate,
) -> FollowResult:
    return following_service.follow(
        session=session,
        user_id=current_user.id,
        post_id=post_id,
        feed_url=follow_in.feed_url,
        rss_key=follow_in.rss_key,
    )


@router.delete("/{post_id}", response_model=UnfollowResult)
def unfollow(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    post_id: str,
    rss_key: str = Query(..., min_length=1),
) -> UnfollowResult:
    return following_service.unfollow(
        session=session,
        user_id=current_user.id,
        post_id=post_id,
        rss_key=rss_key,
    )


@router.get("/{post_id}", response_model=bool)
def is_following(
    *, session: SessionDep, current_user: OptionalCurrentUser, post_id: str
) -> bool:
    return following_service.is_following(
        session=session,
        user_id=current_user.id if current_user else None,
        post_id=post_id,
    )


@router.get("/{post_id}/count", response_model=int)
def get_following_count(*, session: SessionDep, post_id: str) -> int:
    return following_service.get_following_count(session=session, post_id=post_id)
