from fastapi import APIRouter

from socialfeed.api.routes import (
    bookmarks,
    chat,
    comments,
    following,
    friends,
    likes,
    login,
    me,
    reports,
    retweets,
    users,
)

api_router = APIRouter()
api_router.include_router(login.router)
api_router.include_router(users.router)
api_router.include_router(me.router)
api_router.include_router(following.router)
api_router.include_router(friends.router)
api_router.include_router(comments.router)
api_router.include_router(retweets.router)
api_router.include_router(likes.router)
api_router.include_router(bookmarks.router)
api_router.include_router(chat.router)
api_router.include_router(reports.router)
