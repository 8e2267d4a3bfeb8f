"""
Profile domain: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.user import User
from inkwell.profile import service as svc
from inkwell.profile.schemas import (
    AccountResponse,
    AdminUpdateUserRequest,
    AdminUserListResponse,
    CreateUserRequest,
    ProfileResponse,
    UpdateProfileRequest,
)
from inkwell.shared.constants import Role
from inkwell.social_graph.service import follow_counts


async def _with_counts(session: AsyncSession, user: User, schema: type[ProfileResponse]):
    followers, following = await follow_counts(session, user.id)
    return schema.model_validate(user).model_copy(
        update={"followers_count": followers, "following_count": following}
    )


async def get_profile(session: AsyncSession, user_id: uuid.UUID) -> ProfileResponse:
    user = await svc.get_user(session, user_id)
    return await _with_counts(session, user, ProfileResponse)


async def get_profile_by_username(session: AsyncSession, username: str) -> ProfileResponse:
    user = await svc.get_user_by_username(session, username)
    return await _with_counts(session, user, ProfileResponse)


async def get_own_profile(session: AsyncSession, user_id: uuid.UUID) -> AccountResponse:
    user = await svc.get_user(session, user_id)
    return await _with_counts(session, user, AccountResponse)


async def update_own_profile(
    session: AsyncSession,
    user_id: uuid.UUID,
    body: UpdateProfileRequest,
) -> AccountResponse:
    user = await svc.update_profile(session, user_id, body.model_dump(exclude_unset=True))
    return await _with_counts(session, user, AccountResponse)


async def provision_user(session: AsyncSession, body: CreateUserRequest) -> AccountResponse:
    user = await svc.create_user(session, body)
    return AccountResponse.model_validate(user)


async def delete_user(session: AsyncSession, user_id: uuid.UUID) -> None:
    await svc.delete_user(session, user_id)


async def list_users(
    session: AsyncSession,
    *,
    page: int,
    size: int,
    role: Role | None = None,
    search: str | None = None,
) -> AdminUserListResponse:
    users, total = await svc.list_users(session, page=page, size=size, role=role, search=search)
    return AdminUserListResponse(
        items=[await _with_counts(session, u, AccountResponse) for u in users],
        total=total,
        page=page,
        size=size,
    )


async def get_user_detail(session: AsyncSession, user_id: uuid.UUID) -> AccountResponse:
    user = await svc.get_user(session, user_id)
    return await _with_counts(session, user, AccountResponse)


async def admin_update_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    body: AdminUpdateUserRequest,
) -> AccountResponse:
    user = await svc.admin_update_user(session, user_id, body.model_dump(exclude_unset=True))
    return await _with_counts(session, user, AccountResponse)
