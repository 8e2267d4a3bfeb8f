"""
Profile domain: pure business logic (zero FastAPI imports).

Account removal cleans up everything the user touched: follow edges in both
directions, likes (with the affected counters rewritten), notifications sent
or received, replies, comments and posts.
"""
from __future__ import annotations

import logging
import uuid

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.engagement import service as engagement
from inkwell.exceptions import UserAlreadyExists, UserNotFound
from inkwell.models.comment import Comment, Reply
from inkwell.models.enums import LikeTargetType
from inkwell.models.like import Like
from inkwell.models.notification import Notification
from inkwell.models.post import Post
from inkwell.models.user import User
from inkwell.posts.service import purge_post_ids
from inkwell.profile.schemas import CreateUserRequest
from inkwell.shared.constants import Role
from inkwell.social_graph import service as social_graph

logger = logging.getLogger(__name__)


async def create_user(session: AsyncSession, payload: CreateUserRequest) -> User:
    """Insert a user; username or email already taken raises UserAlreadyExists (409)."""
    taken = await session.execute(
        sa.select(sa.exists().where(
            sa.or_(User.username == payload.username, User.email == payload.email)
        ))
    )
    if taken.scalar_one():
        raise UserAlreadyExists()

    fields = payload.model_dump(exclude_none=True)
    user = User(**fields)
    try:
        # savepoint: a lost race on the unique keys must not poison the request transaction
        async with session.begin_nested():
            session.add(user)
            await session.flush()
    except IntegrityError:
        raise UserAlreadyExists()
    logger.info("Provisioned user %s (%s)", user.id, user.username)
    return user


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    """Load a user by PK; raise 404 if not found."""
    user = await session.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user


async def get_user_by_username(session: AsyncSession, username: str) -> User:
    result = await session.execute(sa.select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFound()
    return user


async def update_profile(
    session: AsyncSession,
    user_id: uuid.UUID,
    fields: dict,
) -> User:
    """Patch the provided fields onto the user row and persist."""
    user = await get_user(session, user_id)
    for key, value in fields.items():
        setattr(user, key, value)
    await session.flush()
    return user


async def list_users(
    session: AsyncSession,
    *,
    page: int,
    size: int,
    role: Role | None = None,
    search: str | None = None,
) -> tuple[list[User], int]:
    """Admin listing, newest account first. search matches username or email."""
    base = sa.select(User)
    if role is not None:
        base = base.where(User.role == role)
    if search:
        pattern = f"%{search}%"
        base = base.where(sa.or_(User.username.ilike(pattern), User.email.ilike(pattern)))

    total = (
        await session.execute(sa.select(sa.func.count()).select_from(base.subquery()))
    ).scalar_one()
    result = await session.execute(
        base.order_by(User.created_at.desc(), User.id).offset((page - 1) * size).limit(size)
    )
    return list(result.scalars().all()), total


async def admin_update_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    fields: dict,
) -> User:
    """Change username, email or role; a clash with another account raises 409."""
    user = await get_user(session, user_id)
    fields = {key: value for key, value in fields.items() if value is not None}

    clashes = []
    if "username" in fields:
        clashes.append(User.username == fields["username"])
    if "email" in fields:
        clashes.append(User.email == fields["email"])
    if clashes:
        taken = await session.execute(
            sa.select(sa.exists().where(sa.or_(*clashes), User.id != user_id))
        )
        if taken.scalar_one():
            raise UserAlreadyExists()

    for key, value in fields.items():
        setattr(user, key, value)
    try:
        async with session.begin_nested():
            await session.flush()
    except IntegrityError:
        raise UserAlreadyExists()
    logger.info("Admin updated user %s: %s", user_id, sorted(fields))
    return user


async def delete_user(session: AsyncSession, user_id: uuid.UUID) -> None:
    user = await get_user(session, user_id)

    # Targets whose counters change once this user's likes are gone
    liked = (
        await session.execute(
            sa.select(Like.target_type, Like.target_id).where(Like.user_id == user_id)
        )
    ).all()
    # Other people's posts that lose comments
    commented_posts = (
        await session.execute(
            sa.select(Comment.post_id).where(Comment.author_id == user_id).distinct()
        )
    ).scalars().all()

    # lock every counter rewritten below before touching the sets behind it
    locked_posts = {
        target_id for target_type, target_id in liked if target_type == LikeTargetType.POST
    }
    await engagement.lock_counted_rows(
        LikeTargetType.POST, sorted(locked_posts | set(commented_posts)), session
    )
    for target_type in (LikeTargetType.COMMENT, LikeTargetType.REPLY):
        await engagement.lock_counted_rows(
            target_type, [target_id for kind, target_id in liked if kind == target_type], session
        )

    await session.execute(
        sa.delete(Like)
        .where(Like.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    await session.execute(
        sa.delete(Notification)
        .where(sa.or_(Notification.recipient_id == user_id, Notification.sender_id == user_id))
        .execution_options(synchronize_session=False)
    )
    await social_graph.remove_all_edges(session, user_id)

    own_replies = sa.select(Reply.reply_id).where(Reply.author_id == user_id)
    await engagement.delete_likes_on(LikeTargetType.REPLY, own_replies, session)
    await session.execute(
        sa.delete(Reply)
        .where(Reply.author_id == user_id)
        .execution_options(synchronize_session="fetch")
    )
    await engagement.purge_comments(
        sa.select(Comment.comment_id).where(Comment.author_id == user_id), session
    )
    await purge_post_ids(sa.select(Post.post_id).where(Post.author_id == user_id), session)

    for target_type, target_id in liked:
        await engagement.rewrite_like_count(target_type, target_id, session)
    for post_id in commented_posts:
        await engagement.rewrite_comment_count(post_id, session)

    await session.delete(user)
    await session.flush()
    logger.info(
        "Deleted user %s: %d likes and comments on %d posts cleaned up",
        user_id,
        len(liked),
        len(commented_posts),
    )
