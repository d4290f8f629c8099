from collections.abc import Callable

from fastapi.testclient import TestClient

from socialfeed.core.config import settings
from socialfeed.models.comment import Comment
from socialfeed.models.user import User

BASE = f"{settings.API_V1_STR}/comments"


def test_add_list_and_delete_comment(
    client: TestClient, normal_user: User, normal_user_token_headers: dict[str, str]
):
    created = client.post(
        f"{BASE}/",
        json={"entry_guid": "entry-1", "feed_url": "https://a.com/rss", "content": "Hi"},
        headers=normal_user_token_headers,
    )
    assert created.status_code == 200
    comment_id = created.json()["comment_id"]

    listed = client.get(f"{BASE}/", params={"entry_guid": "entry-1"})
    assert [c["id"] for c in listed.json()] == [comment_id]
    assert listed.json()[0]["user"]["username"] == normal_user.username

    deleted = client.delete(f"{BASE}/{comment_id}", headers=normal_user_token_headers)
    assert deleted.json() == {"success": True, "deleted": 1}


def test_empty_comment(client: TestClient, normal_user_token_headers: dict[str, str]):
    response = client.post(
        f"{BASE}/",
        json={"entry_guid": "entry-1", "feed_url": "https://a.com/rss", "content": "  "},
        headers=normal_user_token_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Comment cannot be empty."


def test_delete_someone_elses_comment(
    client: TestClient,
    comment_factory: Callable[..., Comment],
    normal_user_token_headers: dict[str, str],
):
    comment = comment_factory()

    response = client.delete(f"{BASE}/{comment.id}", headers=normal_user_token_headers)

    assert response.status_code == 403


def test_toggle_comment_like_and_batch(
    client: TestClient,
    token_headers: Callable,
    user_factory: Callable[..., User],
    comment_factory: Callable[..., Comment],
):
    user = user_factory()
    comment = comment_factory()

    liked = client.post(f"{BASE}/{comment.id}/like", headers=token_headers(user))
    assert liked.json() == {"is_liked": True, "count": 1}

    batch = client.get(
        f"{BASE}/likes",
        params={"comment_ids": [str(comment.id)]},
        headers=token_headers(user),
    )
    assert batch.json() == [
        {"comment_id": str(comment.id), "is_liked": True, "count": 1}
    ]
