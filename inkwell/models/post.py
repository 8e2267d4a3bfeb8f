import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.shared.database import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    post_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    author_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(sa.String(300), nullable=False)
    body: Mapped[str] = mapped_column(sa.Text, nullable=False)
    cover_image_url: Mapped[str | None] = mapped_column(sa.String(500), nullable=True)
    category: Mapped[str | None] = mapped_column(sa.String(50), nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(sa.JSON, nullable=True)
    # Denormalized; always rewritten as COUNT(*) of the underlying rows
    like_count: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_now, onupdate=_now
    )

    comments = relationship("Comment", back_populates="post", lazy="noload")

    __table_args__ = (
        sa.Index("ix_posts_author_id", "author_id"),
        sa.Index("ix_posts_created_at", "created_at"),
    )
