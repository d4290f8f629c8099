from socialfeed.models.user import User
from socialfeed.schemas.user import UserDisplay, UserMePublic, UserPublic


def to_public(user: User) -> UserPublic:
    User.model_validate(user)
    return UserPublic(**user.model_dump())


def to_me_public(user: User) -> UserMePublic:
    User.model_validate(user)
    return UserMePublic(**user.model_dump())


def to_display(user: User) -> UserDisplay:
    """
    Converts a User to the lightweight projection shown next to comments and friends.
    Falls back to the display name, then to "Guest", when the username is blank.
    """
    return UserDisplay(
        user_id=user.id,
        username=user.username or user.name or "Guest",
        name=user.name,
        profile_image=user.profile_image,
    )
