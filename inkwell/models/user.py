import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.shared.constants import Role
from inkwell.shared.database import Base

from .enums import user_role_enum


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered account.

    ``following`` / ``followers`` are not columns: both are read from the
    ``follows`` edge table, so the two directions can never disagree.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(sa.String(30), unique=True, nullable=False)
    # Stored lowercased; uniqueness is therefore case-insensitive
    email: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)
    display_name: Mapped[str | None] = mapped_column(sa.String(150), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    bio: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    role: Mapped[Role] = mapped_column(user_role_enum, nullable=False, default=Role.USER)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )
