import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.shared.database import Base

from .enums import LikeTargetType, like_target_type_enum


class Like(Base):
    __tablename__ = "likes"

    like_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    target_type: Mapped[LikeTargetType] = mapped_column(like_target_type_enum, nullable=False)
    # Points to posts.post_id, comments.comment_id or comment_replies.reply_id;
    # polymorphic, so no FK is enforced
    target_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        sa.UniqueConstraint("user_id", "target_type", "target_id", name="uq_likes_user_target"),
        sa.Index("ix_likes_user_id", "user_id"),
        sa.Index("ix_likes_target", "target_type", "target_id"),
    )
