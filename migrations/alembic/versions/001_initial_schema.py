"""Initial schema: users, follows, posts, comments, replies, likes, notifications

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables created:
  - users              Accounts; follow counts are never stored here
  - follows            Directed follow edges (follower → following), one row per edge
  - posts              Posts with denormalized like_count / comment_count
  - comments           Comments on posts with denormalized like_count
  - comment_replies    Replies owned by a comment, one row per reply
  - likes              Like sets for posts, comments and replies
  - notifications      Best-effort notification inbox

PostgreSQL ENUM types created:
  - userrole           user / admin / super_admin
  - liketargettype     POST / COMMENT / REPLY
  - notificationtype   like / comment / reply / follow
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ENUMS = {
    "userrole": ("user", "admin", "super_admin"),
    "liketargettype": ("POST", "COMMENT", "REPLY"),
    "notificationtype": ("like", "comment", "reply", "follow"),
}


def _uuid_pk(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.UUID(as_uuid=True),
        nullable=False,
        server_default=sa.text("gen_random_uuid()"),
    )


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def _user_fk(column: str, table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        [column], ["users.id"], name=f"fk_{table}_{column}", ondelete="CASCADE"
    )


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. PostgreSQL ENUM types ──────────────────────────────────────────────
    for name, values in _ENUMS.items():
        labels = ", ".join(f"'{v}'" for v in values)
        op.execute(
            f"""
            DO $$ BEGIN
                CREATE TYPE {name} AS ENUM ({labels});
            EXCEPTION WHEN duplicate_object THEN NULL;
            END $$;
            """
        )

    # ── 2. users ──────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        _uuid_pk("id"),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(150), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column(
            "role",
            postgresql.ENUM(name="userrole", create_type=False),
            nullable=False,
            server_default=sa.text("'user'"),
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # ── 3. follows ────────────────────────────────────────────────────────────
    op.create_table(
        "follows",
        _uuid_pk("follow_id"),
        sa.Column("follower_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("following_id", postgresql.UUID(as_uuid=True), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("follow_id", name="pk_follows"),
        _user_fk("follower_id", "follows"),
        _user_fk("following_id", "follows"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        sa.CheckConstraint("follower_id != following_id", name="ck_follows_no_self"),
    )
    op.create_index("idx_follows_follower_id", "follows", ["follower_id"])
    op.create_index("idx_follows_following_id", "follows", ["following_id"])

    # ── 4. posts ──────────────────────────────────────────────────────────────
    op.create_table(
        "posts",
        _uuid_pk("post_id"),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("cover_image_url", sa.String(500), nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("tags", sa.JSON, nullable=True),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer, nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("post_id", name="pk_posts"),
        _user_fk("author_id", "posts"),
    )
    op.create_index("ix_posts_author_id", "posts", ["author_id"])
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    # ── 5. comments ───────────────────────────────────────────────────────────
    op.create_table(
        "comments",
        _uuid_pk("comment_id"),
        sa.Column("post_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("comment_id", name="pk_comments"),
        sa.ForeignKeyConstraint(
            ["post_id"], ["posts.post_id"], name="fk_comments_post_id", ondelete="CASCADE"
        ),
        _user_fk("author_id", "comments"),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])
    op.create_index("ix_comments_author_id", "comments", ["author_id"])

    # ── 6. comment_replies ────────────────────────────────────────────────────
    op.create_table(
        "comment_replies",
        _uuid_pk("reply_id"),
        sa.Column("comment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("reply_id", name="pk_comment_replies"),
        sa.ForeignKeyConstraint(
            ["comment_id"],
            ["comments.comment_id"],
            name="fk_comment_replies_comment_id",
            ondelete="CASCADE",
        ),
        _user_fk("author_id", "comment_replies"),
    )
    op.create_index("ix_comment_replies_comment_id", "comment_replies", ["comment_id"])

    # ── 7. likes ──────────────────────────────────────────────────────────────
    op.create_table(
        "likes",
        _uuid_pk("like_id"),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "target_type",
            postgresql.ENUM(name="liketargettype", create_type=False),
            nullable=False,
        ),
        # Polymorphic reference; no FK
        sa.Column("target_id", postgresql.UUID(as_uuid=True), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("like_id", name="pk_likes"),
        _user_fk("user_id", "likes"),
        sa.UniqueConstraint(
            "user_id", "target_type", "target_id", name="uq_likes_user_target"
        ),
    )
    op.create_index("ix_likes_user_id", "likes", ["user_id"])
    op.create_index("ix_likes_target", "likes", ["target_type", "target_id"])

    # ── 8. notifications ──────────────────────────────────────────────────────
    op.create_table(
        "notifications",
        _uuid_pk("notification_id"),
        sa.Column("recipient_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sender_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "type",
            postgresql.ENUM(name="notificationtype", create_type=False),
            nullable=False,
        ),
        sa.Column("post_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("comment_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.text("false")),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("notification_id", name="pk_notifications"),
        _user_fk("recipient_id", "notifications"),
        _user_fk("sender_id", "notifications"),
    )
    op.create_index(
        "ix_notifications_recipient_created_at",
        "notifications",
        ["recipient_id", "created_at"],
    )
    op.create_index(
        "ix_notifications_recipient_is_read",
        "notifications",
        ["recipient_id", "is_read"],
    )


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    for table in (
        "notifications",
        "likes",
        "comment_replies",
        "comments",
        "posts",
        "follows",
        "users",
    ):
        op.drop_table(table)
    for name in reversed(list(_ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name}")
