from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from inkwell.models.enums import NotificationType


class NotificationSummary(BaseModel):
    """Single notification item for the notifications feed."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(validation_alias="notification_id")
    type: NotificationType
    sender_id: UUID
    post_id: UUID | None = None
    comment_id: UUID | None = None
    message: str
    is_read: bool
    created_at: datetime


class NotificationsPageResponse(BaseModel):
    """Offset-paginated notifications list for the current user."""

    items: list[NotificationSummary]
    total: int = Field(description="Total notifications matching the filter.")
    limit: int = Field(description="Requested page size.")
    offset: int = Field(description="Requested offset.")


class UnreadCountResponse(BaseModel):
    count: int


class MarkReadRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    notification_ids: list[UUID] = Field(min_length=1, max_length=500)


class MarkReadResponse(BaseModel):
    updated: int


class ClearAllResponse(BaseModel):
    deleted: int
