import uuid

import pytest
from httpx import AsyncClient
from limits import parse
from sqlalchemy import select

from inkwell.models import Notification
from inkwell.models.enums import NotificationType
from inkwell.rate_limit import FOLLOW_RATE_LIMIT, limiter


@pytest.mark.asyncio
async def test_follow_requires_auth(async_client: AsyncClient, make_user) -> None:
    brook = await make_user("brook")
    response = await async_client.post(f"/api/v1/users/{brook.id}/follow")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_follow_and_unfollow_flow(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    headers = auth_headers(ada)

    response = await async_client.post(f"/api/v1/users/{brook.id}/follow", headers=headers)
    assert response.status_code == 200
    assert response.json() == {
        "followed": True,
        "is_following": True,
        "followers_count": 1,
        "message": "followed",
    }

    again = await async_client.post(f"/api/v1/users/{brook.id}/follow", headers=headers)
    assert again.status_code == 200
    assert again.json()["followed"] is False
    assert again.json()["followers_count"] == 1

    check = await async_client.get(f"/api/v1/users/{brook.id}/isFollowing", headers=headers)
    assert check.json() == {"is_following": True}

    profile = await async_client.get(f"/api/v1/users/{brook.id}")
    assert profile.json()["followers_count"] == 1
    assert profile.json()["following_count"] == 0

    response = await async_client.post(f"/api/v1/users/{brook.id}/unfollow", headers=headers)
    assert response.status_code == 200
    assert response.json()["unfollowed"] is True
    assert response.json()["followers_count"] == 0

    check = await async_client.get(f"/api/v1/users/{brook.id}/isFollowing", headers=headers)
    assert check.json() == {"is_following": False}


@pytest.mark.asyncio
async def test_follow_self_is_400(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    response = await async_client.post(f"/api/v1/users/{ada.id}/follow", headers=auth_headers(ada))
    assert response.status_code == 400
    assert response.json()["detail"] == "You cannot follow yourself."


@pytest.mark.asyncio
async def test_follow_unknown_user_is_404(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    response = await async_client.post(
        f"/api/v1/users/{uuid.uuid4()}/follow", headers=auth_headers(ada)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_follow_notifies_target_once(
    async_client: AsyncClient, make_user, auth_headers, session_factory
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    headers = auth_headers(ada)

    await async_client.post(f"/api/v1/users/{brook.id}/follow", headers=headers)
    await async_client.post(f"/api/v1/users/{brook.id}/follow", headers=headers)

    async with session_factory() as session:
        rows = (
            await session.execute(
                select(Notification).where(Notification.recipient_id == brook.id)
            )
        ).scalars().all()
    assert len(rows) == 1
    assert rows[0].type == NotificationType.FOLLOW
    assert rows[0].sender_id == ada.id
    assert rows[0].message == "ada started following you"


@pytest.mark.asyncio
async def test_follow_survives_notification_failure(
    async_client: AsyncClient, make_user, auth_headers, monkeypatch
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")

    async def _broken(*args, **kwargs):
        raise RuntimeError("notification store down")

    monkeypatch.setattr("inkwell.notifications.service.create_notification", _broken)

    response = await async_client.post(
        f"/api/v1/users/{brook.id}/follow", headers=auth_headers(ada)
    )
    assert response.status_code == 200
    assert response.json()["followed"] is True

    check = await async_client.get(
        f"/api/v1/users/{brook.id}/isFollowing", headers=auth_headers(ada)
    )
    assert check.json() == {"is_following": True}


@pytest.mark.asyncio
async def test_unfollow_consistency_fault_is_500(
    async_client: AsyncClient, make_user, auth_headers, monkeypatch
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    headers = auth_headers(ada)
    await async_client.post(f"/api/v1/users/{brook.id}/follow", headers=headers)

    async def _lost_delete(session, follower_id, following_id) -> None:
        return None

    monkeypatch.setattr("inkwell.social_graph.service._remove_edge", _lost_delete)
    response = await async_client.post(f"/api/v1/users/{brook.id}/unfollow", headers=headers)
    assert response.status_code == 500
    assert "still present" in response.json()["detail"]


@pytest.mark.asyncio
async def test_followers_list_with_viewer(
    async_client: AsyncClient, make_user, auth_headers
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    cyrus = await make_user("cyrus")
    await async_client.post(f"/api/v1/users/{cyrus.id}/follow", headers=auth_headers(ada))
    await async_client.post(f"/api/v1/users/{cyrus.id}/follow", headers=auth_headers(brook))
    await async_client.post(f"/api/v1/users/{ada.id}/follow", headers=auth_headers(brook))

    anonymous = await async_client.get(f"/api/v1/users/{cyrus.id}/followers")
    body = anonymous.json()
    assert body["total"] == 2
    assert body["size"] is None
    assert [item["user"]["username"] for item in body["items"]] == ["ada", "brook"]
    assert all(item["is_followed_by_me"] is False for item in body["items"])

    as_brook = await async_client.get(
        f"/api/v1/users/{cyrus.id}/followers", headers=auth_headers(brook)
    )
    flags = {item["user"]["username"]: item["is_followed_by_me"] for item in as_brook.json()["items"]}
    assert flags == {"ada": True, "brook": False}

    paged = await async_client.get(f"/api/v1/users/{cyrus.id}/followers?page=2&size=1")
    assert [item["user"]["username"] for item in paged.json()["items"]] == ["brook"]

    following = await async_client.get(f"/api/v1/users/{brook.id}/following")
    assert [item["user"]["username"] for item in following.json()["items"]] == ["cyrus", "ada"]


@pytest.mark.asyncio
async def test_follow_rate_limit(async_client: AsyncClient, make_user, auth_headers) -> None:
    if not limiter.enabled:
        pytest.skip("rate limiting disabled in this environment")
    ada = await make_user("ada")
    brook = await make_user("brook")
    headers = auth_headers(ada)
    allowed = parse(FOLLOW_RATE_LIMIT).amount

    codes = []
    for _ in range(allowed + 1):
        response = await async_client.post(f"/api/v1/users/{brook.id}/follow", headers=headers)
        codes.append(response.status_code)
    assert codes[0] == 200
    assert codes[-1] == 429
