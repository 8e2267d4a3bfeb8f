from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from inkwell.shared.constants import ADMIN_ROLES, Role


class CurrentUser(BaseModel):
    """User context from JWT; used by every router."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str
    roles: list[Role] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return any(r in ADMIN_ROLES for r in self.roles)
