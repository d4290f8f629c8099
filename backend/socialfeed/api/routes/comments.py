import uuid

from fastapi import APIRouter, Query

from socialfeed.api.deps import CurrentUser, OptionalCurrentUser, SessionDep
from socialfeed.schemas.comment import (
    CommentCreate,
    CommentCreated,
    CommentDeleted,
    CommentLikeStatus,
    CommentLikeStatusWithId,
    CommentPublic,
)
from socialfeed.services import comment_likes as comment_likes_service
from socialfeed.services import comments as comments_service

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/", response_model=CommentCreated)
def add_comment(
    *, session: SessionDep, current_user: CurrentUser, comment_in: CommentCreate
) -> CommentCreated:
    return comments_service.add_comment(
        session=session, user_id=current_user.id, comment_in=comment_in
    )


@router.get("/", response_model=list[CommentPublic])
def get_comments(
    *, session: SessionDep, entry_guid: str = Query(..., min_length=1)
) -> list[CommentPublic]:
    return comments_service.get_comments(session=session, entry_guid=entry_guid)


@router.get("/batch", response_model=list[list[CommentPublic]])
def batch_get_comments(
    *, session: SessionDep, entry_guids: list[str] = Query([])
) -> list[list[CommentPublic]]:
    return comments_service.batch_get_comments(
        session=session, entry_guids=entry_guids
    )


@router.get("/likes", response_model=list[CommentLikeStatusWithId])
def batch_get_comment_likes(
    *,
    session: SessionDep,
    current_user: OptionalCurrentUser,
    comment_ids: list[uuid.UUID] = Query([]),
) -> list[CommentLikeStatusWithId]:
    return comment_likes_service.batch_get_comment_likes(
        session=session,
        user_id=current_user.id if current_user else None,
        comment_ids=comment_ids,
    )


@router.delete("/{comment_id}", response_model=CommentDeleted)
def delete_comment(
    *, session: SessionDep, current_user: CurrentUser, comment_id: uuid.UUID
) -> CommentDeleted:
    return comments_service.delete_comment(
        session=session, user_id=current_user.id, comment_id=comment_id
    )


@router.get("/{comment_id}/replies", response_model=list[CommentPublic])
def get_comment_replies(
    *, session: SessionDep, comment_id: uuid.UUID
) -> list[CommentPublic]:
    return comments_service.get_comment_replies(session=session, comment_id=comment_id)


@router.post("/{comment_id}/like", response_model=CommentLikeStatus)
def toggle_comment_like(
    *, session: SessionDep, current_user: CurrentUser, comment_id: uuid.UUID
) -> CommentLikeStatus:
    return comment_likes_service.toggle_comment_like(
        session=session, user_id=current_user.id, comment_id=comment_id
    )


@router.get("/{comment_id}/like", response_model=CommentLikeStatus)
def get_comment_like_status(
    *, session: SessionDep, current_user: OptionalCurrentUser, comment_id: uuid.UUID
) -> CommentLikeStatus:
    return comment_likes_service.get_comment_like_status(
        session=session,
        user_id=current_user.id if current_user else None,
        comment_id=comment_id,
    )
