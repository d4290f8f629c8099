from fastapi import APIRouter

from socialfeed.api.deps import CurrentUser, SessionDep
from socialfeed.converters import user as user_converters
from socialfeed.models.user import UserUpdateMe
from socialfeed.schemas.user import UserMePublic
from socialfeed.services import me as me_service

router = APIRouter(prefix="/me", tags=["me"])


@router.get("/", response_model=UserMePublic)
def get_current_user(current_user: CurrentUser) -> UserMePublic:
    return user_converters.to_me_public(current_user)


@router.patch("/", response_model=UserMePublic)
def update_user_me(
    *, session: SessionDep, user_in: UserUpdateMe, current_user: CurrentUser
) -> UserMePublic:
    return me_service.update_profile(
        session=session, user_in=user_in, current_user=current_user
    )
