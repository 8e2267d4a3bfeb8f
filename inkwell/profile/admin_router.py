"""
Profile domain: admin-facing routes.

Routes:
  GET    /api/v1/admin/users             List users with filters and pagination
  GET    /api/v1/admin/users/{user_id}   Single user detail
  PATCH  /api/v1/admin/users/{user_id}   Change username, email or role
  DELETE /api/v1/admin/users/{user_id}   Delete a user and everything they own

Requires: ADMIN or SUPER_ADMIN role.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import require_admin
from inkwell.database import get_db
from inkwell.profile import controller as ctrl
from inkwell.profile.schemas import (
    AccountResponse,
    AdminUpdateUserRequest,
    AdminUserListResponse,
)
from inkwell.shared.constants import Role
from inkwell.shared.models import CurrentUser

router = APIRouter(prefix="/admin/users", tags=["admin"])


@router.get(
    "",
    response_model=AdminUserListResponse,
    summary="[Admin] List users",
    description="Newest account first.",
)
async def list_users(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    role: Role | None = Query(None, description="Filter by role"),
    search: str | None = Query(None, max_length=200, description="Username or email"),
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminUserListResponse:
    return await ctrl.list_users(session, page=page, size=size, role=role, search=search)


@router.get(
    "/{user_id}",
    response_model=AccountResponse,
    summary="[Admin] Get a user",
)
async def get_user_detail(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.get_user_detail(session, user_id)


@router.patch(
    "/{user_id}",
    response_model=AccountResponse,
    summary="[Admin] Edit a user",
    description=(
        "Only username, email and role can be changed here. A username or "
        "email held by another account returns 409."
    ),
)
async def update_user(
    user_id: uuid.UUID,
    body: AdminUpdateUserRequest,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.admin_update_user(session, user_id, body)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="[Admin] Delete a user",
    description=(
        "Removes the account, its follow edges, likes (counters are rewritten), "
        "notifications, replies, comments and posts in one transaction."
    ),
)
async def delete_user(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> None:
    await ctrl.delete_user(session, user_id)
