"""
Notification inbox: routes for the authenticated recipient.

Routes:
  GET    /notifications                 List my notifications (newest first)
  GET    /notifications/unread-count    Number of unread notifications
  PUT    /notifications/read            Mark the listed notifications read
  POST   /notifications/mark-all-read   Mark everything read
  DELETE /notifications/clear-all       Delete every notification I received
  DELETE /notifications/{id}            Delete one notification

/clear-all is registered before /{notification_id} so the literal path wins.
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import get_current_user
from inkwell.database import get_db
from inkwell.notifications import controller
from inkwell.notifications.schemas import (
    ClearAllResponse,
    MarkReadRequest,
    MarkReadResponse,
    NotificationsPageResponse,
    UnreadCountResponse,
)
from inkwell.shared.models import CurrentUser

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=NotificationsPageResponse,
    summary="List my notifications",
    description="Returns notifications for the authenticated user, newest first.",
)
async def list_notifications(
    limit: int = Query(20, ge=1, le=100, description="Page size."),
    offset: int = Query(0, ge=0, description="Pagination offset."),
    only_unread: bool = Query(False, description="When true, return only unread notifications."),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationsPageResponse:
    return await controller.get_notifications(
        recipient_id=current_user.id,
        db=db,
        limit=limit,
        offset=offset,
        only_unread=only_unread,
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Count my unread notifications",
)
async def unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    return await controller.get_unread_count(current_user.id, db)


@router.put(
    "/read",
    response_model=MarkReadResponse,
    summary="Mark notifications as read",
    description="Ids that do not belong to the caller are ignored.",
)
async def mark_read(
    body: MarkReadRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MarkReadResponse:
    return await controller.mark_read(current_user.id, body.notification_ids, db)


@router.post(
    "/mark-all-read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark all my notifications as read",
)
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.mark_all_read(current_user.id, db)


@router.delete(
    "/clear-all",
    response_model=ClearAllResponse,
    summary="Delete all my notifications",
)
async def clear_all(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ClearAllResponse:
    return await controller.clear_all(current_user.id, db)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification",
    responses={404: {"description": "Not found or not yours"}},
)
async def delete_notification(
    notification_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_notification(current_user.id, notification_id, db)
