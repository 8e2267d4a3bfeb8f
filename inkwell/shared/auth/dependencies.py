"""
Bearer-token authentication.

Tokens are issued by the identity provider and carry ``sub`` (user id),
``email`` and ``roles``. Anything that fails to decode, has the wrong
issuer or audience, or lacks a usable ``sub`` is treated as anonymous.
"""
import logging
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from inkwell.shared.auth.config import AuthSettings
from inkwell.shared.constants import Role
from inkwell.shared.models import CurrentUser

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="JWT access token")


def get_auth_settings() -> AuthSettings:
    return AuthSettings()


def decode_access_token(token: str, settings: AuthSettings) -> CurrentUser:
    """Verify the token and build the caller's identity. Raises JWTError or ValueError."""
    claims = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        audience=settings.audience,
        options={"leeway": settings.leeway_seconds},
    )
    subject = claims.get("sub")
    if not subject:
        raise ValueError("token has no subject")
    return CurrentUser(
        id=UUID(subject),
        email=claims.get("email") or "",
        roles=[Role(r) for r in claims.get("roles") or []],
    )


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: AuthSettings = Depends(get_auth_settings),
) -> CurrentUser | None:
    if credentials is None or not credentials.credentials:
        return None
    try:
        return decode_access_token(credentials.credentials, settings)
    except (JWTError, ValueError) as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None


async def get_current_user_required(
    user: CurrentUser | None = Depends(get_current_user_optional),
) -> CurrentUser:
    if user is not None:
        return user
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
