import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from inkwell.config import Settings, get_settings
from inkwell.main import app
from inkwell.models import Comment, Follow, Like, Notification, Post, Reply
from inkwell.shared.constants import Role

INTERNAL = {"X-Internal-Token": "internal-test-token"}


@pytest.mark.asyncio
async def test_provision_user(async_client: AsyncClient) -> None:
    user_id = uuid.uuid4()
    response = await async_client.post(
        "/api/v1/internal/users",
        json={"id": str(user_id), "username": "ada", "email": "Ada@Example.com"},
        headers=INTERNAL,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["id"] == str(user_id)
    assert body["email"] == "ada@example.com"
    assert body["role"] == "user"
    assert body["followers_count"] == 0

    by_name = await async_client.get("/api/v1/users/by-username/ada")
    assert by_name.status_code == 200
    assert by_name.json()["id"] == str(user_id)
    assert "email" not in by_name.json()


@pytest.mark.asyncio
async def test_provision_requires_internal_token(async_client: AsyncClient) -> None:
    payload = {"username": "ada", "email": "ada@example.com"}
    missing = await async_client.post("/api/v1/internal/users", json=payload)
    assert missing.status_code == 401

    wrong = await async_client.post(
        "/api/v1/internal/users", json=payload, headers={"X-Internal-Token": "nope"}
    )
    assert wrong.status_code == 401


@pytest.mark.asyncio
async def test_provision_duplicate_is_409(async_client: AsyncClient, make_user) -> None:
    await make_user("ada")
    response = await async_client.post(
        "/api/v1/internal/users",
        json={"username": "ada", "email": "other@example.com"},
        headers=INTERNAL,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_provision_rejects_bad_username(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/api/v1/internal/users",
        json={"username": "no spaces", "email": "x@example.com"},
        headers=INTERNAL,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_me_and_update(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")

    me = await async_client.get("/api/v1/users/me", headers=auth_headers(ada))
    assert me.status_code == 200
    assert me.json()["email"] == "ada@example.com"

    patched = await async_client.patch(
        "/api/v1/users/me", json={"bio": "Writes about compilers"}, headers=auth_headers(ada)
    )
    assert patched.status_code == 200
    assert patched.json()["bio"] == "Writes about compilers"
    assert patched.json()["display_name"] is None

    public = await async_client.get(f"/api/v1/users/{ada.id}")
    assert public.json()["bio"] == "Writes about compilers"


@pytest.mark.asyncio
async def test_unknown_profile_is_404(async_client: AsyncClient) -> None:
    response = await async_client.get(f"/api/v1/users/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found."


@pytest.mark.asyncio
async def test_admin_delete_user_cleans_up(
    async_client: AsyncClient, make_user, auth_headers, session_factory
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    root = await make_user("root")

    # brook: follows ada, likes ada's post, comments on it, replies to ada's comment
    ada_post = (
        await async_client.post(
            "/api/v1/posts", json={"title": "ada's", "body": "b"}, headers=auth_headers(ada)
        )
    ).json()["post_id"]
    brook_post = (
        await async_client.post(
            "/api/v1/posts", json={"title": "brook's", "body": "b"}, headers=auth_headers(brook)
        )
    ).json()["post_id"]
    await async_client.post(f"/api/v1/users/{ada.id}/follow", headers=auth_headers(brook))
    await async_client.post(f"/api/v1/users/{brook.id}/follow", headers=auth_headers(ada))
    await async_client.put(f"/api/v1/posts/{ada_post}/like", headers=auth_headers(brook))
    await async_client.put(f"/api/v1/posts/{brook_post}/like", headers=auth_headers(ada))
    await async_client.post(
        f"/api/v1/posts/{ada_post}/comments", json={"body": "from brook"}, headers=auth_headers(brook)
    )
    ada_comment = (
        await async_client.post(
            f"/api/v1/posts/{ada_post}/comments", json={"body": "from ada"}, headers=auth_headers(ada)
        )
    ).json()["comment_id"]
    await async_client.post(
        f"/api/v1/comments/{ada_comment}/replies", json={"body": "r"}, headers=auth_headers(brook)
    )

    denied = await async_client.delete(f"/api/v1/admin/users/{brook.id}", headers=auth_headers(ada))
    assert denied.status_code == 403

    response = await async_client.delete(
        f"/api/v1/admin/users/{brook.id}", headers=auth_headers(root, admin=True)
    )
    assert response.status_code == 204

    assert (await async_client.get(f"/api/v1/users/{brook.id}")).status_code == 404
    assert (await async_client.get(f"/api/v1/posts/{brook_post}")).status_code == 404

    post = (await async_client.get(f"/api/v1/posts/{ada_post}")).json()
    assert post["like_count"] == 0
    assert post["comment_count"] == 1

    profile = (await async_client.get(f"/api/v1/users/{ada.id}")).json()
    assert (profile["followers_count"], profile["following_count"]) == (0, 0)

    async with session_factory() as session:
        async def count(model, *where) -> int:
            stmt = select(func.count()).select_from(model)
            if where:
                stmt = stmt.where(*where)
            return (await session.execute(stmt)).scalar_one()

        assert await count(Follow) == 0
        assert await count(Like) == 0
        assert await count(Reply) == 0
        assert await count(Comment) == 1
        assert await count(Post) == 1
        assert await count(Notification, Notification.sender_id == brook.id) == 0
        assert await count(Notification, Notification.recipient_id == brook.id) == 0


@pytest.mark.asyncio
async def test_admin_list_and_get_users(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    await make_user("brook")
    root = await make_user("root", role=Role.ADMIN)
    admin = auth_headers(root, admin=True)

    denied = await async_client.get("/api/v1/admin/users", headers=auth_headers(ada))
    assert denied.status_code == 403

    everyone = await async_client.get("/api/v1/admin/users", headers=admin)
    assert everyone.status_code == 200
    body = everyone.json()
    assert body["total"] == 3
    assert {u["username"] for u in body["items"]} == {"ada", "brook", "root"}
    assert all("email" in u for u in body["items"])

    paged = await async_client.get("/api/v1/admin/users?page=2&size=2", headers=admin)
    assert paged.json()["total"] == 3
    assert len(paged.json()["items"]) == 1

    admins = await async_client.get("/api/v1/admin/users?role=admin", headers=admin)
    assert [u["username"] for u in admins.json()["items"]] == ["root"]

    searched = await async_client.get("/api/v1/admin/users?search=BRO", headers=admin)
    assert [u["username"] for u in searched.json()["items"]] == ["brook"]

    detail = await async_client.get(f"/api/v1/admin/users/{ada.id}", headers=admin)
    assert detail.status_code == 200
    assert detail.json()["email"] == "ada@example.com"

    missing = await async_client.get(f"/api/v1/admin/users/{uuid.uuid4()}", headers=admin)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_admin_update_user(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    await make_user("brook")
    root = await make_user("root")
    admin = auth_headers(root, admin=True)

    denied = await async_client.patch(
        f"/api/v1/admin/users/{ada.id}", json={"role": "admin"}, headers=auth_headers(ada)
    )
    assert denied.status_code == 403

    promoted = await async_client.patch(
        f"/api/v1/admin/users/{ada.id}",
        json={"role": "admin", "email": "Ada.L@Example.com", "username": None},
        headers=admin,
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "admin"
    assert promoted.json()["email"] == "ada.l@example.com"
    assert promoted.json()["username"] == "ada"

    clash = await async_client.patch(
        f"/api/v1/admin/users/{ada.id}", json={"username": "brook"}, headers=admin
    )
    assert clash.status_code == 409

    # Re-sending the current username is not a clash with itself
    same = await async_client.patch(
        f"/api/v1/admin/users/{ada.id}", json={"username": "ada"}, headers=admin
    )
    assert same.status_code == 200

    bad_role = await async_client.patch(
        f"/api/v1/admin/users/{ada.id}", json={"role": "owner"}, headers=admin
    )
    assert bad_role.status_code == 422

    missing = await async_client.patch(
        f"/api/v1/admin/users/{uuid.uuid4()}", json={"role": "user"}, headers=admin
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_provisioning_closed_without_configured_token(async_client: AsyncClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(
        internal_api_token="", redis_enabled=False
    )
    response = await async_client.post(
        "/api/v1/internal/users",
        json={"username": "ada", "email": "ada@example.com"},
        headers={"X-Internal-Token": "anything"},
    )
    assert response.status_code == 401
