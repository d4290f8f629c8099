from fastapi import APIRouter, Query

from socialfeed.api.deps import CurrentUser, OptionalCurrentUser, SessionDep
from socialfeed.models.entry import EntryCreate
from socialfeed.schemas.entry import (
    BookmarkRemoved,
    BookmarkResult,
    BookmarkStatus,
    UserBookmarksPage,
)
from socialfeed.services import bookmarks as bookmarks_service

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("/", response_model=BookmarkResult)
def bookmark(
    *, session: SessionDep, current_user: CurrentUser, entry: EntryCreate
) -> BookmarkResult:
    return bookmarks_service.bookmark(
        session=session, user_id=current_user.id, entry=entry
    )


@router.delete("/", response_model=BookmarkRemoved)
def remove_bookmark(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    entry_guid: str = Query(..., min_length=1),
) -> BookmarkRemoved:
    return bookmarks_service.remove_bookmark(
        session=session, user_id=current_user.id, entry_guid=entry_guid
    )


@router.get("/status", response_model=BookmarkStatus)
def get_bookmark_status(
    *,
    session: SessionDep,
    current_user: OptionalCurrentUser,
    entry_guid: str = Query(..., min_length=1),
) -> BookmarkStatus:
    return bookmarks_service.get_bookmark_status(
        session=session,
        user_id=current_user.id if current_user else None,
        entry_guid=entry_guid,
    )


@router.get("/statuses", response_model=dict[str, BookmarkStatus])
def batch_get_bookmark_statuses(
    *,
    session: SessionDep,
    current_user: OptionalCurrentUser,
    entry_guids: list[str] = Query([]),
) -> dict[str, BookmarkStatus]:
    return bookmarks_service.batch_get_bookmark_statuses(
        session=session,
        user_id=current_user.id if current_user else None,
        entry_guids=entry_guids,
    )


@router.get("/me", response_model=UserBookmarksPage)
def get_my_bookmarks(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    limit: int = Query(30, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> UserBookmarksPage:
    return bookmarks_service.get_user_bookmarks(
        session=session, user_id=current_user.id, limit=limit, offset=offset
    )
