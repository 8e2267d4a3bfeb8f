"""
Auth dependencies used by the routers.

These wrap the shared token dependencies and add role / service guards.
"""
from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, status

from inkwell.config import Settings, get_settings
from inkwell.exceptions import InternalTokenInvalid
from inkwell.shared.auth.dependencies import (
    get_current_user_optional,
    get_current_user_required,
)
from inkwell.shared.models import CurrentUser

# Alias the shared dependencies so routes import from here, not from shared
# directly.
get_current_user = get_current_user_required
get_optional_user = get_current_user_optional


def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Raise 403 unless the authenticated user holds the ADMIN or SUPER_ADMIN role."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required.",
        )
    return current_user


def require_internal_token(
    x_internal_token: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Guard for service-to-service routes.

    Fails closed: with no INTERNAL_API_TOKEN configured every call is rejected.
    """
    expected = settings.internal_api_token
    if not expected or not x_internal_token:
        raise InternalTokenInvalid()
    if not secrets.compare_digest(x_internal_token, expected):
        raise InternalTokenInvalid()
