from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.exceptions import NotificationNotFound
from inkwell.models.enums import NotificationType
from inkwell.models.notification import Notification


async def create_notification(
    recipient_id: UUID,
    sender_id: UUID,
    type_: NotificationType,
    message: str,
    db: AsyncSession,
    post_id: UUID | None = None,
    comment_id: UUID | None = None,
) -> Notification:
    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type_,
        message=message,
        post_id=post_id,
        comment_id=comment_id,
        is_read=False,
    )
    db.add(notification)
    await db.flush()
    return notification


async def list_notifications(
    recipient_id: UUID,
    db: AsyncSession,
    limit: int,
    offset: int,
    only_unread: bool,
) -> tuple[list[Notification], int]:
    base = select(Notification).where(Notification.recipient_id == recipient_id)
    if only_unread:
        base = base.where(Notification.is_read.is_(False))

    count_query = select(func.count()).select_from(base.subquery())
    total = (await db.execute(count_query)).scalar_one()

    rows = await db.execute(
        base.order_by(Notification.created_at.desc(), Notification.notification_id)
        .offset(offset)
        .limit(limit)
    )
    return list(rows.scalars().all()), total


async def unread_count(recipient_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
    )
    return result.scalar_one()


async def mark_read(recipient_id: UUID, notification_ids: list[UUID], db: AsyncSession) -> int:
    """Mark the given notifications read; ids belonging to someone else are ignored."""
    if not notification_ids:
        return 0
    result = await db.execute(
        update(Notification)
        .where(
            Notification.recipient_id == recipient_id,
            Notification.notification_id.in_(notification_ids),
        )
        .values(is_read=True)
    )
    return result.rowcount


async def mark_all_read(recipient_id: UUID, db: AsyncSession) -> None:
    await db.execute(
        update(Notification)
        .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )


async def delete_notification(recipient_id: UUID, notification_id: UUID, db: AsyncSession) -> None:
    result = await db.execute(
        delete(Notification).where(
            Notification.recipient_id == recipient_id,
            Notification.notification_id == notification_id,
        )
    )
    if result.rowcount == 0:
        raise NotificationNotFound()


async def clear_all(recipient_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        delete(Notification).where(Notification.recipient_id == recipient_id)
    )
    return result.rowcount
