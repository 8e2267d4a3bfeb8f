"""
Social graph domain: pure business logic (zero FastAPI imports).

A follow is one row in ``follows``. "A follows B" and "B is a follower of A"
are two reads of the same row, so they cannot disagree.

State rules:
  follow:    cannot follow self (checked first), max 5000 following,
             already-following is a successful no-op
  unfollow:  not-following is a successful no-op; the removal is verified
             by re-reading the edge
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.exceptions import (
    CannotFollowSelf,
    ConsistencyFault,
    FollowLimitExceeded,
    UserNotFound,
)
from inkwell.models.follow import Follow
from inkwell.models.user import User
from inkwell.shared.database import insert_or_ignore
from inkwell.social_graph.constants import (
    FOLLOW_LIMIT,
    MSG_ALREADY_FOLLOWING,
    MSG_FOLLOWED,
    MSG_NOT_FOLLOWING,
    MSG_UNFOLLOWED,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FollowOutcome:
    followed: bool
    is_following: bool
    followers_count: int
    message: str
    actor: User
    target: User


@dataclass(frozen=True)
class UnfollowOutcome:
    unfollowed: bool
    is_following: bool
    followers_count: int
    message: str


# ── Internal helpers ───────────────────────────────────────────────────────────

async def _get_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user


async def _follow_exists(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        ))
    )
    return result.scalar_one()


async def _count_following(session: AsyncSession, user_id: uuid.UUID) -> int:
    result = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    return result.scalar_one()


async def _count_followers(session: AsyncSession, user_id: uuid.UUID) -> int:
    result = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(Follow.following_id == user_id)
    )
    return result.scalar_one()


async def _remove_edge(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> None:
    await session.execute(
        sa.delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )


# ── Follow ─────────────────────────────────────────────────────────────────────

async def follow(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> FollowOutcome:
    if follower_id == following_id:
        raise CannotFollowSelf()
    target = await _get_user(session, following_id)
    actor = await _get_user(session, follower_id)

    followed = False
    if not await _follow_exists(session, follower_id, following_id):
        if await _count_following(session, follower_id) >= FOLLOW_LIMIT:
            raise FollowLimitExceeded()
        # A concurrent follow of the same pair makes this a no-op, not an error
        followed = await insert_or_ignore(
            session,
            Follow,
            {"follow_id": uuid.uuid4(), "follower_id": follower_id, "following_id": following_id},
            ["follower_id", "following_id"],
        )

    if followed:
        logger.info("User %s followed %s", follower_id, following_id)
    return FollowOutcome(
        followed=followed,
        is_following=True,
        followers_count=await _count_followers(session, following_id),
        message=MSG_FOLLOWED if followed else MSG_ALREADY_FOLLOWING,
        actor=actor,
        target=target,
    )


async def unfollow(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> UnfollowOutcome:
    await _get_user(session, following_id)

    if not await _follow_exists(session, follower_id, following_id):
        return UnfollowOutcome(
            unfollowed=False,
            is_following=False,
            followers_count=await _count_followers(session, following_id),
            message=MSG_NOT_FOLLOWING,
        )

    await _remove_edge(session, follower_id, following_id)
    if await _follow_exists(session, follower_id, following_id):
        logger.error(
            "Follow edge %s -> %s still present after delete", follower_id, following_id
        )
        raise ConsistencyFault("Unfollow did not take effect; the follow edge is still present.")

    logger.info("User %s unfollowed %s", follower_id, following_id)
    return UnfollowOutcome(
        unfollowed=True,
        is_following=False,
        followers_count=await _count_followers(session, following_id),
        message=MSG_UNFOLLOWED,
    )


async def is_following(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> bool:
    """Membership read only; unknown users simply report False."""
    return await _follow_exists(session, follower_id, following_id)


async def follow_counts(session: AsyncSession, user_id: uuid.UUID) -> tuple[int, int]:
    """Return (followers_count, following_count)."""
    return (
        await _count_followers(session, user_id),
        await _count_following(session, user_id),
    )


# ── Following / Followers lists ────────────────────────────────────────────────

async def _list_edges(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    owner_column,
    other_column,
    viewer_id: uuid.UUID | None,
    page: int,
    size: int | None,
) -> tuple[list[tuple[Follow, User, bool]], int]:
    await _get_user(session, user_id)

    total_r = await session.execute(
        sa.select(sa.func.count()).select_from(Follow).where(owner_column == user_id)
    )
    total = total_r.scalar_one()

    stmt = (
        sa.select(Follow, User)
        .join(User, User.id == other_column)
        .where(owner_column == user_id)
        .order_by(Follow.created_at.asc(), Follow.follow_id.asc())
    )
    if size is not None:
        stmt = stmt.limit(size).offset((page - 1) * size)
    rows = (await session.execute(stmt)).all()  # list of (Follow, User)

    followed_set: set[uuid.UUID] = set()
    if viewer_id is not None:
        followed_set = await _batch_followed_by(session, viewer_id, [u.id for _, u in rows])

    return [(f, u, u.id in followed_set) for f, u in rows], total


async def get_following(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID | None,
    page: int = 1,
    size: int | None = None,
) -> tuple[list[tuple[Follow, User, bool]], int]:
    """
    Return (rows, total) where each row is (Follow, User[following], is_followed_by_viewer).

    Rows come in follow order, oldest first. ``size=None`` returns every row.
    """
    return await _list_edges(
        session,
        user_id,
        owner_column=Follow.follower_id,
        other_column=Follow.following_id,
        viewer_id=viewer_id,
        page=page,
        size=size,
    )


async def get_followers(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    viewer_id: uuid.UUID | None,
    page: int = 1,
    size: int | None = None,
) -> tuple[list[tuple[Follow, User, bool]], int]:
    """
    Return (rows, total) where each row is (Follow, User[follower], is_followed_by_viewer).
    """
    return await _list_edges(
        session,
        user_id,
        owner_column=Follow.following_id,
        other_column=Follow.follower_id,
        viewer_id=viewer_id,
        page=page,
        size=size,
    )


async def _batch_followed_by(
    session: AsyncSession,
    viewer_id: uuid.UUID,
    target_ids: list[uuid.UUID],
) -> set[uuid.UUID]:
    """Return the subset of target_ids that viewer_id follows."""
    if not target_ids:
        return set()
    result = await session.execute(
        sa.select(Follow.following_id).where(
            Follow.follower_id == viewer_id,
            Follow.following_id.in_(target_ids),
        )
    )
    return {row[0] for row in result.all()}


# ── Account removal ────────────────────────────────────────────────────────────

async def remove_all_edges(session: AsyncSession, user_id: uuid.UUID) -> int:
    """Delete every follow edge touching user_id, in either direction."""
    result = await session.execute(
        sa.delete(Follow).where(
            sa.or_(Follow.follower_id == user_id, Follow.following_id == user_id)
        )
    )
    return result.rowcount
