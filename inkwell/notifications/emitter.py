"""
Best-effort notification emitter.

Called by controllers after the primary write (follow, like, comment, reply)
has been flushed. The insert runs inside a SAVEPOINT so that a failure rolls
back only the notification; the error is logged and dropped. There is no
retry queue: a lost notification is acceptable.
"""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.enums import NotificationType
from inkwell.models.notification import Notification
from inkwell.models.user import User
from inkwell.notifications import service

logger = logging.getLogger(__name__)


async def emit(
    db: AsyncSession,
    *,
    recipient_id: UUID,
    sender_id: UUID,
    type_: NotificationType,
    message: str,
    post_id: UUID | None = None,
    comment_id: UUID | None = None,
) -> Notification | None:
    if recipient_id == sender_id:
        return None
    try:
        async with db.begin_nested():
            return await service.create_notification(
                recipient_id=recipient_id,
                sender_id=sender_id,
                type_=type_,
                message=message,
                db=db,
                post_id=post_id,
                comment_id=comment_id,
            )
    except Exception:  # noqa: BLE001
        logger.exception(
            "Dropped %s notification for recipient %s from %s",
            type_.value,
            recipient_id,
            sender_id,
        )
        return None


async def sender_name(db: AsyncSession, sender_id: UUID) -> str:
    """Username used in notification messages."""
    user = await db.get(User, sender_id)
    return user.username if user is not None else "Someone"
