"""
Social graph domain: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict


# ── Embedded user reference (used inside list items) ───────────────────────────

class SocialUserRef(BaseModel):
    """Minimal user profile embedded in follower/following list items."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: str | None
    avatar_url: str | None
    bio: str | None


# ── Follow ─────────────────────────────────────────────────────────────────────

class FollowListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID           # follow_id
    user: SocialUserRef     # the other party (following or follower depending on context)
    created_at: datetime
    is_followed_by_me: bool  # does the viewer follow this person? False when anonymous


class FollowListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    items: list[FollowListItem]
    total: int
    page: int
    size: int | None


class FollowActionResponse(BaseModel):
    followed: bool
    is_following: bool
    followers_count: int
    message: str


class UnfollowActionResponse(BaseModel):
    unfollowed: bool
    is_following: bool
    followers_count: int
    message: str


class IsFollowingResponse(BaseModel):
    is_following: bool
