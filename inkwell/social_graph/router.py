"""
Social graph domain: user-facing routes.

All routes prefixed /api/v1/users (same prefix as the profile router; the
sub-paths below never overlap with /{user_id} or /me).

Routes:
  POST   /{user_id}/follow         Follow a user  (rate limited)
  POST   /{user_id}/unfollow       Unfollow
  GET    /{user_id}/isFollowing    Does the caller follow this user?
  GET    /{user_id}/followers      List followers (viewer optional)
  GET    /{user_id}/following      List following (viewer optional)
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import get_current_user, get_optional_user
from inkwell.database import get_db
from inkwell.rate_limit import FOLLOW_RATE_LIMIT, limiter
from inkwell.shared.models import CurrentUser
from inkwell.social_graph import controller as ctrl
from inkwell.social_graph.schemas import (
    FollowActionResponse,
    FollowListResponse,
    IsFollowingResponse,
    UnfollowActionResponse,
)

router = APIRouter(prefix="/users", tags=["social-graph"])


# ── Follow ─────────────────────────────────────────────────────────────────────

@router.post(
    "/{user_id}/follow",
    response_model=FollowActionResponse,
    status_code=status.HTTP_200_OK,
    summary="Follow a user",
    description=(
        "Idempotent: following someone you already follow returns "
        "followed=false with message 'already following'."
    ),
)
@limiter.limit(FOLLOW_RATE_LIMIT)
async def follow_user(
    request: Request,
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowActionResponse:
    return await ctrl.follow_user(session, current_user.id, user_id)


@router.post(
    "/{user_id}/unfollow",
    response_model=UnfollowActionResponse,
    status_code=status.HTTP_200_OK,
    summary="Unfollow a user",
    description="Idempotent: unfollowing someone you do not follow returns unfollowed=false.",
)
async def unfollow_user(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> UnfollowActionResponse:
    return await ctrl.unfollow_user(session, current_user.id, user_id)


@router.get(
    "/{user_id}/isFollowing",
    response_model=IsFollowingResponse,
    summary="Check whether I follow a user",
)
async def is_following(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> IsFollowingResponse:
    return await ctrl.is_following(session, current_user.id, user_id)


# ── Lists ──────────────────────────────────────────────────────────────────────

@router.get(
    "/{user_id}/followers",
    response_model=FollowListResponse,
    summary="List a user's followers",
    description="Oldest follow first. Omit `size` to return every follower.",
)
async def list_followers(
    user_id: uuid.UUID,
    page: int = Query(1, ge=1),
    size: int | None = Query(None, ge=1, le=100),
    current_user: CurrentUser | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    viewer_id = current_user.id if current_user else None
    return await ctrl.list_followers(session, user_id, viewer_id, page=page, size=size)


@router.get(
    "/{user_id}/following",
    response_model=FollowListResponse,
    summary="List who a user follows",
    description="Oldest follow first. Omit `size` to return every entry.",
)
async def list_following(
    user_id: uuid.UUID,
    page: int = Query(1, ge=1),
    size: int | None = Query(None, ge=1, le=100),
    current_user: CurrentUser | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    viewer_id = current_user.id if current_user else None
    return await ctrl.list_following(session, user_id, viewer_id, page=page, size=size)
