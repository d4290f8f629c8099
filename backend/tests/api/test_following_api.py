from fastapi.testclient import TestClient

from socialfeed.core.config import settings
from socialfeed.models.user import User

BASE = f"{settings.API_V1_STR}/following"


def test_follow_then_states(
    client: TestClient, normal_user: User, normal_user_token_headers: dict[str, str]
):
    response = client.post(
        f"{BASE}/post-1",
        json={"feed_url": "https://a.com/rss", "rss_key": "key-a"},
        headers=normal_user_token_headers,
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "feed_url": "https://a.com/rss",
        "action": "followed",
    }

    states = client.get(
        f"{BASE}/states",
        params={"post_ids": ["post-1", "post-2"]},
        headers=normal_user_token_headers,
    )
    assert states.json() == [True, False]

    count = client.get(f"{BASE}/post-1/count")
    assert count.json() == 1


def test_follow_twice_is_cooldown(
    client: TestClient, normal_user_token_headers: dict[str, str]
):
    payload = {"feed_url": "https://a.com/rss", "rss_key": "key-a"}
    client.post(f"{BASE}/post-1", json=payload, headers=normal_user_token_headers)

    response = client.post(
        f"{BASE}/post-1", json=payload, headers=normal_user_token_headers
    )

    assert response.status_code == 429
    assert response.json()["code"] == "COOLDOWN"
    assert int(response.headers["Retry-After"]) >= 1


def test_unfollow_when_not_following(
    client: TestClient, normal_user_token_headers: dict[str, str]
):
    response = client.delete(
        f"{BASE}/post-9",
        params={"rss_key": "key-a"},
        headers=normal_user_token_headers,
    )

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"] == "Not following this post."
