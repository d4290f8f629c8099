from fastapi import APIRouter

from socialfeed.api.deps import CurrentUser, OptionalCurrentUser, SessionDep
from socialfeed.schemas.chat import ChatMessageIn, ChatMessageResult, RateLimitStatus
from socialfeed.services import chat as chat_service

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/messages", response_model=ChatMessageResult, response_model_exclude_none=True)
def send_chat_message(
    *, session: SessionDep, current_user: CurrentUser, message_in: ChatMessageIn
) -> ChatMessageResult:
    return chat_service.send_chat_message(
        session=session, user_id=current_user.id, message_in=message_in
    )


@router.get("/rate-limit", response_model=RateLimitStatus)
def get_rate_limit_status(
    *, session: SessionDep, current_user: OptionalCurrentUser
) -> RateLimitStatus:
    return chat_service.get_rate_limit_status(
        session=session, user_id=current_user.id if current_user else None
    )
