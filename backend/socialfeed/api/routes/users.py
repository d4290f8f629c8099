from fastapi import APIRouter

from socialfeed.api.deps import SessionDep
from socialfeed.models.user import UserRegister
from socialfeed.schemas.user import UserPublic
from socialfeed.services import users as users_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/signup", response_model=UserPublic)
def register_user(*, session: SessionDep, user_in: UserRegister) -> UserPublic:
    return users_service.register_user(
        session=session,
        user_in=user_in,
    )


@router.get("/{username}", response_model=UserPublic)
def get_user_by_username(*, session: SessionDep, username: str) -> UserPublic:
    return users_service.get_user_by_username(session=session, username=username)
