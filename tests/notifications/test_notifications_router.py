import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.enums import NotificationType
from inkwell.notifications import emitter


async def _seed(session_factory, recipient, sender, count: int) -> list[uuid.UUID]:
    ids = []
    async with session_factory() as session:
        for i in range(count):
            notification = await emitter.emit(
                session,
                recipient_id=recipient.id,
                sender_id=sender.id,
                type_=NotificationType.FOLLOW,
                message=f"event {i}",
            )
            ids.append(notification.notification_id)
        await session.commit()
    return ids


@pytest.mark.asyncio
async def test_emit_skips_self(db_session: AsyncSession, make_user) -> None:
    ada = await make_user("ada")
    result = await emitter.emit(
        db_session,
        recipient_id=ada.id,
        sender_id=ada.id,
        type_=NotificationType.LIKE,
        message="ada liked your post",
    )
    assert result is None


@pytest.mark.asyncio
async def test_emit_swallows_and_logs_failures(
    db_session: AsyncSession, make_user, monkeypatch, caplog
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")

    async def _broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("inkwell.notifications.service.create_notification", _broken)
    result = await emitter.emit(
        db_session,
        recipient_id=ada.id,
        sender_id=brook.id,
        type_=NotificationType.FOLLOW,
        message="brook started following you",
    )
    assert result is None
    assert "Dropped follow notification" in caplog.text


@pytest.mark.asyncio
async def test_list_and_unread_count(
    async_client: AsyncClient, make_user, auth_headers, session_factory
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    await _seed(session_factory, ada, brook, 3)

    listed = await async_client.get("/api/v1/notifications?limit=2", headers=auth_headers(ada))
    assert listed.status_code == 200
    body = listed.json()
    assert body["total"] == 3
    assert len(body["items"]) == 2
    assert body["items"][0]["message"] == "event 2"

    count = await async_client.get("/api/v1/notifications/unread-count", headers=auth_headers(ada))
    assert count.json() == {"count": 3}

    others = await async_client.get("/api/v1/notifications", headers=auth_headers(brook))
    assert others.json()["total"] == 0


@pytest.mark.asyncio
async def test_mark_read_ignores_foreign_ids(
    async_client: AsyncClient, make_user, auth_headers, session_factory
) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    mine = await _seed(session_factory, ada, brook, 2)
    theirs = await _seed(session_factory, brook, ada, 1)

    response = await async_client.put(
        "/api/v1/notifications/read",
        json={"notification_ids": [str(mine[0]), str(theirs[0])]},
        headers=auth_headers(ada),
    )
    assert response.json() == {"updated": 1}

    unread = await async_client.get(
        "/api/v1/notifications?only_unread=true", headers=auth_headers(ada)
    )
    assert [item["id"] for item in unread.json()["items"]] == [str(mine[1])]

    brook_count = await async_client.get(
        "/api/v1/notifications/unread-count", headers=auth_headers(brook)
    )
    assert brook_count.json() == {"count": 1}


@pytest.mark.asyncio
async def test_mark_all_read(async_client: AsyncClient, make_user, auth_headers, session_factory) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    await _seed(session_factory, ada, brook, 2)

    response = await async_client.post("/api/v1/notifications/mark-all-read", headers=auth_headers(ada))
    assert response.status_code == 204

    count = await async_client.get("/api/v1/notifications/unread-count", headers=auth_headers(ada))
    assert count.json() == {"count": 0}


@pytest.mark.asyncio
async def test_delete_and_clear(async_client: AsyncClient, make_user, auth_headers, session_factory) -> None:
    ada = await make_user("ada")
    brook = await make_user("brook")
    mine = await _seed(session_factory, ada, brook, 3)
    theirs = await _seed(session_factory, brook, ada, 1)

    foreign = await async_client.delete(
        f"/api/v1/notifications/{theirs[0]}", headers=auth_headers(ada)
    )
    assert foreign.status_code == 404

    deleted = await async_client.delete(f"/api/v1/notifications/{mine[0]}", headers=auth_headers(ada))
    assert deleted.status_code == 204

    cleared = await async_client.delete("/api/v1/notifications/clear-all", headers=auth_headers(ada))
    assert cleared.json() == {"deleted": 2}

    still_there = await async_client.get("/api/v1/notifications", headers=auth_headers(brook))
    assert still_there.json()["total"] == 1


@pytest.mark.asyncio
async def test_notifications_require_auth(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/v1/notifications")
    assert response.status_code == 401
