from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# inkwell/shared/auth/config.py -> repo root
_REPO_ROOT = Path(__file__).resolve().parents[3]


class AuthSettings(BaseSettings):
    """Verification parameters for access tokens (JWT_* environment variables)."""

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        env_file=[str(_REPO_ROOT / ".env"), ".env"],
        env_file_encoding="utf-8",
        extra="ignore",
    )

    secret: str = "change-me"
    algorithm: str = "HS256"
    issuer: str = "inkwell-auth"
    audience: str = "inkwell-services"
    # Tolerated clock skew between the identity provider and this service
    leeway_seconds: int = 30
