from collections.abc import Generator
from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jwt.exceptions import InvalidTokenError
from pydantic import ValidationError
from sqlmodel import Session

from socialfeed.core import security
from socialfeed.core.config import settings
from socialfeed.core.db import engine
from socialfeed.exceptions.base import NotAuthenticated
from socialfeed.exceptions.user_exceptions import InactiveUser
from socialfeed.models.auth_schemas import TokenPayload
from socialfeed.models.user import User

optional_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/login/access-token", auto_error=False
)


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]
TokenDep = Annotated[str | None, Depends(optional_oauth2)]


def _user_from_token(session: Session, token: str) -> User:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[security.ALGORITHM]
        )
        token_data = TokenPayload(**payload)
        user_id = UUID(token_data.sub) if token_data.sub else None
    except (InvalidTokenError, ValidationError, ValueError):
        raise NotAuthenticated("Not authenticated: could not validate credentials")
    user = session.get(User, user_id) if user_id else None
    if not user:
        raise NotAuthenticated("Not authenticated: user not found")
    if not user.is_active:
        raise InactiveUser()
    return user


def get_current_user(session: SessionDep, token: TokenDep) -> User:
    if not token:
        raise NotAuthenticated()
    return _user_from_token(session, token)


def get_optional_current_user(session: SessionDep, token: TokenDep) -> User | None:
    # Read-only endpoints answer anonymous callers with defaults
    if not token:
        return None
    return _user_from_token(session, token)


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalCurrentUser = Annotated[User | None, Depends(get_optional_current_user)]
