import uuid

import pytest
from httpx import AsyncClient


async def _create_post(client: AsyncClient, headers: dict) -> str:
    response = await client.post(
        "/api/v1/posts", json={"title": "Essay", "body": "<p>Words</p>"}, headers=headers
    )
    assert response.status_code == 201
    return response.json()["post_id"]


async def _notifications(client: AsyncClient, headers: dict) -> list[dict]:
    response = await client.get("/api/v1/notifications", headers=headers)
    assert response.status_code == 200
    return response.json()["items"]


@pytest.mark.asyncio
async def test_post_like_toggle(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    post_id = await _create_post(async_client, auth_headers(ada))

    liked = await async_client.put(f"/api/v1/posts/{post_id}/like", headers=auth_headers(brook))
    assert liked.status_code == 200
    assert liked.json() == {
        "liked": True,
        "likes_count": 1,
        "target_type": "POST",
        "target_id": post_id,
    }

    post = await async_client.get(f"/api/v1/posts/{post_id}", headers=auth_headers(brook))
    assert post.json()["is_liked"] is True
    assert post.json()["like_count"] == 1

    unliked = await async_client.put(f"/api/v1/posts/{post_id}/like", headers=auth_headers(brook))
    assert unliked.json()["liked"] is False
    assert unliked.json()["likes_count"] == 0


@pytest.mark.asyncio
async def test_like_notifies_author_but_not_self(
    async_client: AsyncClient, make_user, auth_headers
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    post_id = await _create_post(async_client, auth_headers(ada))

    await async_client.put(f"/api/v1/posts/{post_id}/like", headers=auth_headers(ada))
    assert await _notifications(async_client, auth_headers(ada)) == []

    await async_client.put(f"/api/v1/posts/{post_id}/like", headers=auth_headers(brook))
    # Unliking does not notify
    await async_client.put(f"/api/v1/posts/{post_id}/like", headers=auth_headers(brook))
    items = await _notifications(async_client, auth_headers(ada))
    assert len(items) == 1
    assert items[0]["type"] == "like"
    assert items[0]["message"] == "brook liked your post"
    assert items[0]["post_id"] == post_id


@pytest.mark.asyncio
async def test_like_missing_post_is_404(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    response = await async_client.put(
        f"/api/v1/posts/{uuid.uuid4()}/like", headers=auth_headers(ada)
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Post not found."


@pytest.mark.asyncio
async def test_comment_lifecycle(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    post_id = await _create_post(async_client, auth_headers(ada))

    created = await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"body": "  Great read  "}, headers=auth_headers(brook)
    )
    assert created.status_code == 201
    comment = created.json()
    assert comment["body"] == "Great read"
    assert comment["like_count"] == 0
    assert comment["replies"] == []

    post = await async_client.get(f"/api/v1/posts/{post_id}")
    assert post.json()["comment_count"] == 1

    reply = await async_client.post(
        f"/api/v1/comments/{comment['comment_id']}/replies",
        json={"body": "Thank you"},
        headers=auth_headers(ada),
    )
    assert reply.status_code == 201
    reply_id = reply.json()["reply_id"]

    listed = await async_client.get(f"/api/v1/posts/{post_id}/comments")
    body = listed.json()
    assert body["total"] == 1
    assert [r["body"] for r in body["items"][0]["replies"]] == ["Thank you"]

    edited = await async_client.put(
        f"/api/v1/comments/{comment['comment_id']}/replies/{reply_id}",
        json={"body": "Thanks!"},
        headers=auth_headers(ada),
    )
    assert edited.status_code == 200
    assert edited.json()["body"] == "Thanks!"

    liked = await async_client.post(
        f"/api/v1/comments/{comment['comment_id']}/replies/{reply_id}/like",
        headers=auth_headers(brook),
    )
    assert liked.json()["liked"] is True
    assert liked.json()["target_type"] == "REPLY"

    deleted = await async_client.delete(
        f"/api/v1/comments/{comment['comment_id']}", headers=auth_headers(brook)
    )
    assert deleted.status_code == 204

    gone = await async_client.get(f"/api/v1/comments/{comment['comment_id']}")
    assert gone.status_code == 404
    post = await async_client.get(f"/api/v1/posts/{post_id}")
    assert post.json()["comment_count"] == 0


@pytest.mark.asyncio
async def test_comment_and_reply_notifications(
    async_client: AsyncClient, make_user, auth_headers
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    post_id = await _create_post(async_client, auth_headers(ada))

    created = await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"body": "hi"}, headers=auth_headers(brook)
    )
    comment_id = created.json()["comment_id"]
    await async_client.post(
        f"/api/v1/comments/{comment_id}/replies", json={"body": "hey"}, headers=auth_headers(ada)
    )
    await async_client.post(f"/api/v1/comments/{comment_id}/like", headers=auth_headers(ada))

    to_ada = await _notifications(async_client, auth_headers(ada))
    assert [n["message"] for n in to_ada] == ["brook commented on your post"]
    assert to_ada[0]["comment_id"] == comment_id

    to_brook = await _notifications(async_client, auth_headers(brook))
    assert sorted(n["message"] for n in to_brook) == [
        "ada liked your comment",
        "ada replied to your comment",
    ]


@pytest.mark.asyncio
async def test_comment_edit_forbidden_for_others(
    async_client: AsyncClient, make_user, auth_headers
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    root = await make_user("root")
    post_id = await _create_post(async_client, auth_headers(ada))
    created = await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"body": "mine"}, headers=auth_headers(brook)
    )
    comment_id = created.json()["comment_id"]

    response = await async_client.put(
        f"/api/v1/comments/{comment_id}", json={"body": "yours"}, headers=auth_headers(ada)
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Not authorized to edit this comment."

    response = await async_client.delete(
        f"/api/v1/comments/{comment_id}", headers=auth_headers(root, admin=True)
    )
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_comment_validation(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    post_id = await _create_post(async_client, auth_headers(ada))

    blank = await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"body": "   "}, headers=auth_headers(ada)
    )
    assert blank.status_code == 422

    too_long = await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"body": "x" * 2001}, headers=auth_headers(ada)
    )
    assert too_long.status_code == 422


@pytest.mark.asyncio
async def test_reply_on_missing_comment(async_client: AsyncClient, make_user, auth_headers) -> None:
    ada = await make_user("ada")
    response = await async_client.post(
        f"/api/v1/comments/{uuid.uuid4()}/replies", json={"body": "?"}, headers=auth_headers(ada)
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Comment not found."


@pytest.mark.asyncio
async def test_unprovisioned_caller_gets_404_not_500(
    async_client: AsyncClient, make_user, auth_headers
) -> None:
    class _Ghost:
        id = uuid.uuid4()
        email = "ghost@example.com"

    ada = await make_user("ada")
    post_id = await _create_post(async_client, auth_headers(ada))
    comment = await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"body": "real"}, headers=auth_headers(ada)
    )
    comment_id = comment.json()["comment_id"]

    like = await async_client.put(f"/api/v1/posts/{post_id}/like", headers=auth_headers(_Ghost))
    assert like.status_code == 404
    assert like.json()["detail"] == "User not found."

    commented = await async_client.post(
        f"/api/v1/posts/{post_id}/comments", json={"body": "boo"}, headers=auth_headers(_Ghost)
    )
    assert commented.status_code == 404
    assert commented.json()["detail"] == "User not found."

    replied = await async_client.post(
        f"/api/v1/comments/{comment_id}/replies", json={"body": "boo"}, headers=auth_headers(_Ghost)
    )
    assert replied.status_code == 404
    assert replied.json()["detail"] == "User not found."

    post = await async_client.get(f"/api/v1/posts/{post_id}")
    assert post.json()["like_count"] == 0
    assert post.json()["comment_count"] == 1
