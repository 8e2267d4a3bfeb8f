"""
Service-to-service routes (not exposed through the public gateway).

Routes:
  POST /internal/users   Provision a user row when the identity provider registers an account

Guarded by the X-Internal-Token header.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import require_internal_token
from inkwell.database import get_db
from inkwell.profile import controller as ctrl
from inkwell.profile.schemas import AccountResponse, CreateUserRequest

router = APIRouter(
    prefix="/internal",
    tags=["internal"],
    dependencies=[Depends(require_internal_token)],
)


@router.post(
    "/users",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Internal] Provision a user",
    responses={409: {"description": "Username or email already taken"}},
)
async def provision_user(
    body: CreateUserRequest,
    session: AsyncSession = Depends(get_db),
) -> AccountResponse:
    return await ctrl.provision_user(session, body)
