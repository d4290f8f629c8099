from socialfeed.models.entry import Bookmark, Like, Retweet
from socialfeed.schemas.entry import BookmarkPublic, LikePublic, RetweetPublic


def retweet_to_public(retweet: Retweet) -> RetweetPublic:
    Retweet.model_validate(retweet)
    return RetweetPublic(**retweet.model_dump())


def like_to_public(like: Like) -> LikePublic:
    Like.model_validate(like)
    return LikePublic(**like.model_dump())


def bookmark_to_public(bookmark: Bookmark) -> BookmarkPublic:
    Bookmark.model_validate(bookmark)
    return BookmarkPublic(**bookmark.model_dump())
