from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from socialfeed.api.deps import SessionDep
from socialfeed.core import security
from socialfeed.core.config import settings
from socialfeed.crud import user as users_crud
from socialfeed.exceptions.base import ValidationFailed
from socialfeed.exceptions.user_exceptions import InactiveUser
from socialfeed.models.auth_schemas import Token

router = APIRouter(tags=["login"])


@router.post("/login/access-token")
def login_access_token(
    session: SessionDep, form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
) -> Token:
    """
    OAuth2 compatible token login, get an access token for future requests
    """
    user = users_crud.authenticate(
        session=session, username=form_data.username, password=form_data.password
    )
    if not user:
        raise ValidationFailed("Incorrect username or password")
    elif not user.is_active:
        raise InactiveUser()
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return Token(
        access_token=security.create_access_token(
            user.id, expires_delta=access_token_expires
        )
    )
