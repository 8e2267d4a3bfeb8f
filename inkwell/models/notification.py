import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.shared.database import Base

from .enums import NotificationType, notification_type_enum


class Notification(Base):
    __tablename__ = "notifications"

    notification_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, primary_key=True, default=uuid.uuid4
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[NotificationType] = mapped_column(notification_type_enum, nullable=False)
    # Soft references: the post or comment may be deleted after the fact
    post_id: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    comment_id: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    message: Mapped[str] = mapped_column(sa.String(500), nullable=False)
    is_read: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        sa.Index("ix_notifications_recipient_created_at", "recipient_id", "created_at"),
        sa.Index("ix_notifications_recipient_is_read", "recipient_id", "is_read"),
    )
