from collections.abc import Callable
from typing import Any
from uuid import UUID

import httpx

from .optimistic import ToggleValue

__all__ = [
    "SocialFeedAPIError",
    "SocialFeedClient",
]

DEFAULT_TIMEOUT = 10.0


class SocialFeedAPIError(Exception):
    def __init__(self, message: str, status_code: int, code: str | None = None):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class SocialFeedClient:
    """
    Thin synchronous client for the HTTP API.

    Every non-2xx response raises :class:`SocialFeedAPIError` carrying the
    server's ``detail`` message, which :func:`socialfeed.client.errors.classify_error`
    understands.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        api_prefix: str = "/api/v1",
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + api_prefix,
            timeout=timeout,
            transport=transport,
        )
        self.token = token

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "SocialFeedClient":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self._client.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if not isinstance(payload, dict):
                payload = {}
            detail = payload.get("detail")
            # FastAPI request validation errors carry a list here
            if not isinstance(detail, str):
                detail = response.reason_phrase or "Request failed"
            raise SocialFeedAPIError(detail, response.status_code, payload.get("code"))
        return response.json()

    # Auth

    def login(self, username: str, password: str) -> str:
        payload = self._request(
            "POST",
            "/login/access-token",
            data={"username": username, "password": password},
        )
        self.token = payload["access_token"]
        return self.token

    # Following

    def follow(self, post_id: str, *, feed_url: str, rss_key: str) -> dict:
        return self._request(
            "POST", f"/following/{post_id}", json={"feed_url": feed_url, "rss_key": rss_key}
        )

    def unfollow(self, post_id: str, *, rss_key: str) -> dict:
        return self._request(
            "DELETE", f"/following/{post_id}", params={"rss_key": rss_key}
        )

    def get_follow_states(self, post_ids: list[str]) -> list[bool]:
        return self._request("GET", "/following/states", params={"post_ids": post_ids})

    # Friends

    def send_friend_request(self, requestee_id: UUID) -> UUID:
        return UUID(self._request("POST", f"/friends/requests/{requestee_id}"))

    def accept_friend_request(self, friendship_id: UUID) -> dict:
        return self._request("POST", f"/friends/{friendship_id}/accept")

    def delete_friendship(self, friendship_id: UUID) -> dict:
        return self._request("DELETE", f"/friends/{friendship_id}")

    def get_friendship_status(self, username: str) -> dict:
        return self._request("GET", f"/friends/status/username/{username}")

    # Comments

    def add_comment(
        self,
        *,
        entry_guid: str,
        feed_url: str,
        content: str,
        parent_id: UUID | None = None,
    ) -> dict:
        return self._request(
            "POST",
            "/comments/",
            json={
                "entry_guid": entry_guid,
                "feed_url": feed_url,
                "content": content,
                "parent_id": str(parent_id) if parent_id else None,
            },
        )

    def delete_comment(self, comment_id: UUID) -> dict:
        return self._request("DELETE", f"/comments/{comment_id}")

    def toggle_comment_like(self, comment_id: UUID) -> dict:
        return self._request("POST", f"/comments/{comment_id}/like")

    # Entries

    def retweet(self, entry: dict) -> dict:
        return self._request("POST", "/retweets/", json=entry)

    def unretweet(self, entry_guid: str) -> dict:
        return self._request("DELETE", "/retweets/", params={"entry_guid": entry_guid})

    def get_retweet_status(self, entry_guid: str) -> dict:
        return self._request("GET", "/retweets/status", params={"entry_guid": entry_guid})

    def like(self, entry: dict) -> dict:
        return self._request("POST", "/likes/", json=entry)

    def unlike(self, entry_guid: str) -> dict:
        return self._request("DELETE", "/likes/", params={"entry_guid": entry_guid})

    def get_like_status(self, entry_guid: str) -> dict:
        return self._request("GET", "/likes/status", params={"entry_guid": entry_guid})

    def bookmark(self, entry: dict) -> dict:
        return self._request("POST", "/bookmarks/", json=entry)

    def remove_bookmark(self, entry_guid: str) -> dict:
        return self._request("DELETE", "/bookmarks/", params={"entry_guid": entry_guid})

    def get_bookmark_status(self, entry_guid: str) -> dict:
        return self._request(
            "GET", "/bookmarks/status", params={"entry_guid": entry_guid}
        )

    # Chat

    def send_chat_message(self, message: str, active_button: str) -> dict:
        return self._request(
            "POST",
            "/chat/messages",
            json={"message": message, "active_button": active_button},
        )

    def get_rate_limit_status(self) -> dict:
        return self._request("GET", "/chat/rate-limit")

    # Mutations for OptimisticToggle

    def like_mutation(self, entry: dict) -> Callable[[bool], ToggleValue]:
        def mutate(active: bool) -> ToggleValue:
            if active:
                self.like(entry)
            else:
                self.unlike(entry["entry_guid"])
            status = self.get_like_status(entry["entry_guid"])
            return ToggleValue(active=status["is_liked"], count=status["count"])

        return mutate

    def retweet_mutation(self, entry: dict) -> Callable[[bool], ToggleValue]:
        def mutate(active: bool) -> ToggleValue:
            if active:
                self.retweet(entry)
            else:
                self.unretweet(entry["entry_guid"])
            status = self.get_retweet_status(entry["entry_guid"])
            return ToggleValue(active=status["is_retweeted"], count=status["count"])

        return mutate

    def bookmark_mutation(self, entry: dict) -> Callable[[bool], ToggleValue]:
        # Bookmarks carry no public count
        def mutate(active: bool) -> ToggleValue:
            guid = entry["entry_guid"]
            if not active:
                self.remove_bookmark(guid)
            elif not self.get_bookmark_status(guid)["is_bookmarked"]:
                self.bookmark(entry)
            status = self.get_bookmark_status(guid)
            return ToggleValue(active=status["is_bookmarked"], count=0)

        return mutate

    def comment_like_mutation(self, comment_id: UUID) -> Callable[[bool], ToggleValue]:
        def mutate(active: bool) -> ToggleValue:
            status = self.toggle_comment_like(comment_id)
            return ToggleValue(active=status["is_liked"], count=status["count"])

        return mutate
