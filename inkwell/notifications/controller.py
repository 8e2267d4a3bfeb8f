from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.notifications import service
from inkwell.notifications.schemas import (
    ClearAllResponse,
    MarkReadResponse,
    NotificationsPageResponse,
    NotificationSummary,
    UnreadCountResponse,
)


async def get_notifications(
    recipient_id: UUID,
    db: AsyncSession,
    limit: int,
    offset: int,
    only_unread: bool,
) -> NotificationsPageResponse:
    items, total = await service.list_notifications(
        recipient_id=recipient_id,
        db=db,
        limit=limit,
        offset=offset,
        only_unread=only_unread,
    )
    return NotificationsPageResponse(
        items=[NotificationSummary.model_validate(n) for n in items],
        total=total,
        limit=limit,
        offset=offset,
    )


async def get_unread_count(recipient_id: UUID, db: AsyncSession) -> UnreadCountResponse:
    return UnreadCountResponse(count=await service.unread_count(recipient_id, db))


async def mark_read(
    recipient_id: UUID, notification_ids: list[UUID], db: AsyncSession
) -> MarkReadResponse:
    updated = await service.mark_read(recipient_id, notification_ids, db)
    return MarkReadResponse(updated=updated)


async def mark_all_read(recipient_id: UUID, db: AsyncSession) -> None:
    await service.mark_all_read(recipient_id, db)


async def delete_notification(recipient_id: UUID, notification_id: UUID, db: AsyncSession) -> None:
    await service.delete_notification(recipient_id, notification_id, db)


async def clear_all(recipient_id: UUID, db: AsyncSession) -> ClearAllResponse:
    return ClearAllResponse(deleted=await service.clear_all(recipient_id, db))
