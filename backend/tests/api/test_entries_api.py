from fastapi.testclient import TestClient

from socialfeed.core.config import settings
from socialfeed.models.user import User

ENTRY = {
    "entry_guid": "guid-1",
    "feed_url": "https://a.com/rss",
    "title": "A post",
    "pub_date": "Thu, 01 Jan 2026 12:00:00 GMT",
    "link": "https://a.com/p/1",
}


def test_retweet_round_trip(
    client: TestClient, normal_user: User, normal_user_token_headers: dict[str, str]
):
    base = f"{settings.API_V1_STR}/retweets"

    first = client.post(f"{base}/", json=ENTRY, headers=normal_user_token_headers)
    second = client.post(f"{base}/", json=ENTRY, headers=normal_user_token_headers)

    assert first.json()["action"] == "retweeted"
    assert second.json()["action"] == "unretweeted"
    status = client.get(
        f"{base}/status",
        params={"entry_guid": "guid-1"},
        headers=normal_user_token_headers,
    )
    assert status.json() == {"is_retweeted": False, "count": 0}


def test_like_and_unlike(client: TestClient, normal_user_token_headers: dict[str, str]):
    base = f"{settings.API_V1_STR}/likes"

    liked = client.post(f"{base}/", json=ENTRY, headers=normal_user_token_headers)
    assert liked.json()["like_id"] is not None
    assert client.get(f"{base}/count", params={"entry_guid": "guid-1"}).json() == 1

    unliked = client.delete(
        f"{base}/", params={"entry_guid": "guid-1"}, headers=normal_user_token_headers
    )
    assert unliked.json()["like_id"] == liked.json()["like_id"]
    assert client.get(f"{base}/count", params={"entry_guid": "guid-1"}).json() == 0


def test_bookmark_and_list(
    client: TestClient, normal_user: User, normal_user_token_headers: dict[str, str]
):
    base = f"{settings.API_V1_STR}/bookmarks"

    created = client.post(f"{base}/", json=ENTRY, headers=normal_user_token_headers)
    page = client.get(f"{base}/me", headers=normal_user_token_headers)
    statuses = client.get(
        f"{base}/statuses",
        params={"entry_guids": ["guid-1", "guid-2"]},
        headers=normal_user_token_headers,
    )

    assert created.status_code == 200
    assert created.json()["action"] == "bookmarked"
    assert page.json()["total_count"] == 1
    assert page.json()["bookmarks"][0]["entry_guid"] == "guid-1"
    assert statuses.json() == {
        "guid-1": {"is_bookmarked": True},
        "guid-2": {"is_bookmarked": False},
    }

    removed = client.delete(
        f"{base}/", params={"entry_guid": "guid-1"}, headers=normal_user_token_headers
    )
    assert removed.json()["bookmark_id"] == created.json()["bookmark_id"]
    emptied = client.get(f"{base}/me", headers=normal_user_token_headers)
    assert emptied.json()["total_count"] == 0


def test_bookmarks_require_login(client: TestClient):
    response = client.get(f"{settings.API_V1_STR}/bookmarks/me")

    assert response.status_code == 401


def test_user_likes_listing(
    client: TestClient, normal_user: User, normal_user_token_headers: dict[str, str]
):
    client.post(
        f"{settings.API_V1_STR}/likes/", json=ENTRY, headers=normal_user_token_headers
    )

    page = client.get(f"{settings.API_V1_STR}/likes/users/{normal_user.id}")

    assert page.status_code == 200
    assert [like["entry_guid"] for like in page.json()["likes"]] == ["guid-1"]
    assert page.json()["has_more"] is False


def test_update_me(client: TestClient, normal_user_token_headers: dict[str, str]):
    response = client.patch(
        f"{settings.API_V1_STR}/me/",
        json={"bio": "Reads too many feeds"},
        headers=normal_user_token_headers,
    )

    assert response.status_code == 200
    assert response.json()["bio"] == "Reads too many feeds"


def test_chat_message_and_quota(
    client: TestClient, normal_user_token_headers: dict[str, str]
):
    base = f"{settings.API_V1_STR}/chat"

    sent = client.post(
        f"{base}/messages",
        json={"message": "Hello", "active_button": "support"},
        headers=normal_user_token_headers,
    )
    assert sent.json() == {
        "limited": False,
        "success": True,
        "message": "Message sent successfully",
    }

    quota = client.get(f"{base}/rate-limit", headers=normal_user_token_headers)
    assert quota.json() == {"remaining": 49, "used": 1}


def test_report(client: TestClient, normal_user_token_headers: dict[str, str]):
    response = client.post(
        f"{settings.API_V1_STR}/reports",
        json={
            "name": "Reporter",
            "email": "reporter@example.com",
            "reason": "spam/promo",
            "description": "Spam",
            "post_slug": "a-post",
        },
        headers=normal_user_token_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Report submitted successfully"}
