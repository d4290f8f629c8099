from socialfeed.models.friendship import Friendship
from socialfeed.schemas.friendship import FriendshipPublic


def to_public(friendship: Friendship) -> FriendshipPublic:
    Friendship.model_validate(friendship)
    return FriendshipPublic(**friendship.model_dump())
