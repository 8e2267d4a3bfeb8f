"""Engagement domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from inkwell.engagement.constants import COMMENT_MAX_LENGTH
from inkwell.models.enums import LikeTargetType


# ---------------------------------------------------------------------------
# Like schemas
# ---------------------------------------------------------------------------


class ToggleLikeResponse(BaseModel):
    """Like state after a toggle."""

    liked: bool = Field(description="True if the current user likes the target after the call.")
    likes_count: int = Field(description="Size of the target's like set.")
    target_type: LikeTargetType
    target_id: UUID


# ---------------------------------------------------------------------------
# Comment and reply schemas
# ---------------------------------------------------------------------------


class CommentBodyRequest(BaseModel):
    """Request body for creating or editing a comment or reply."""

    model_config = ConfigDict(str_strip_whitespace=True)

    body: str = Field(
        ...,
        min_length=1,
        max_length=COMMENT_MAX_LENGTH,
        description="Text (max 2,000 chars). New comments are rate limited per user.",
    )


class ReplyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reply_id: UUID
    comment_id: UUID
    author_id: UUID
    body: str
    like_count: int
    created_at: datetime
    updated_at: datetime


class CommentResponse(BaseModel):
    """Comment with its replies, oldest reply first."""

    model_config = ConfigDict(from_attributes=True)

    comment_id: UUID
    post_id: UUID
    author_id: UUID = Field(description="User ID of the commenter.")
    body: str
    like_count: int
    replies: list[ReplyResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CommentListResponse(BaseModel):
    """Offset-paginated list of comments on a post."""

    items: list[CommentResponse]
    total: int
    limit: int
    offset: int


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


class CounterDriftItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    table: str
    row_id: UUID
    column: str
    stored: int
    actual: int


class ReconcileResponse(BaseModel):
    scanned: int
    fixed: bool
    drifts: list[CounterDriftItem]
