"""
Profile domain: user-facing routes.

Routes:
  GET   /users/me                       Own profile (private fields included)
  PATCH /users/me                       Update own profile
  GET   /users/by-username/{username}   Public profile by username
  GET   /users/{user_id}                Public profile by id

/me and /by-username/... are registered before /{user_id}.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import get_current_user
from inkwell.database import get_db
from inkwell.profile import controller as ctrl
from inkwell.profile.schemas import AccountResponse, ProfileResponse, UpdateProfileRequest
from inkwell.shared.models import CurrentUser

router = APIRouter(prefix="/users", tags=["profile"])


@router.get("/me", response_model=AccountResponse, summary="Get own profile")
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.get_own_profile(session, current_user.id)


@router.patch(
    "/me",
    response_model=AccountResponse,
    summary="Update own profile (partial: only provided fields are written)",
)
async def update_me(
    body: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.update_own_profile(session, current_user.id, body)


@router.get(
    "/by-username/{username}",
    response_model=ProfileResponse,
    summary="Get a public profile by username",
)
async def get_by_username(
    username: str,
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await ctrl.get_profile_by_username(session, username)


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get any user's public profile",
    description="followers_count and following_count are counted from the follow edges.",
)
async def get_profile(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    return await ctrl.get_profile(session, user_id)
