"""
Profile domain: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from inkwell.shared.constants import Role

_USERNAME_PATTERN = r"^[A-Za-z0-9_.]+$"


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── Request ───────────────────────────────────────────────────────────────────

class CreateUserRequest(_Base):
    """POST /internal/users: provisioned by the identity provider.

    ``id`` should be the same UUID the provider puts in the JWT ``sub`` claim.
    """

    id: uuid.UUID | None = None
    username: str = Field(min_length=3, max_length=30, pattern=_USERNAME_PATTERN)
    email: EmailStr
    display_name: str | None = Field(None, max_length=150)
    avatar_url: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=500)
    role: Role = Role.USER

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class UpdateProfileRequest(_Base):
    """PATCH /users/me: all fields optional; only provided fields are written."""

    display_name: str | None = Field(None, max_length=150)
    avatar_url: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=500)


class AdminUpdateUserRequest(_Base):
    """PATCH /admin/users/{user_id}: username, email or role. Nulls are ignored."""

    username: str | None = Field(None, min_length=3, max_length=30, pattern=_USERNAME_PATTERN)
    email: EmailStr | None = None
    role: Role | None = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str | None) -> str | None:
        return value.lower() if value else value


# ── Response ──────────────────────────────────────────────────────────────────

class ProfileResponse(BaseModel):
    """Public profile with follow counts read from the edge table."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: str | None
    avatar_url: str | None
    bio: str | None
    role: Role
    followers_count: int = 0
    following_count: int = 0
    created_at: datetime


class AccountResponse(ProfileResponse):
    """Own profile (or provisioning result): adds private fields."""

    email: str
    updated_at: datetime


class AdminUserListResponse(BaseModel):
    items: list[AccountResponse]
    total: int
    page: int
    size: int
