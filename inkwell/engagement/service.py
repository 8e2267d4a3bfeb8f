"""Engagement service: pure business logic, no FastAPI imports.

Likes are a set: one row per (user, target). Every counter is rewritten from
the cardinality of its set in a single UPDATE right after the set changes,
so a drifted counter heals on the next write. Counters are never incremented
in place.

The counted row (post, comment or reply) is locked with SELECT ... FOR UPDATE
before its set changes. Writers on the same target queue on that lock and
each recount starts after the previous writer committed, so concurrent
toggles by different users are all counted under READ COMMITTED.

Replies are rows of their own. Adding a reply never rewrites the parent
comment, so concurrent replies cannot overwrite each other.

Redis is only used for the per-user comment rate limit and is optional.
"""

import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

import redis.asyncio as aioredis
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.permissions import ensure_can_modify
from inkwell.engagement.constants import (
    COMMENT_RATE_KEY,
    COMMENT_RATE_LIMIT,
    COMMENT_RATE_WINDOW,
)
from inkwell.exceptions import (
    CommentNotFound,
    CommentRateLimited,
    PostNotFound,
    ReplyNotFound,
    UserNotFound,
)
from inkwell.models.comment import Comment, Reply
from inkwell.models.enums import LikeTargetType
from inkwell.models.like import Like
from inkwell.models.post import Post
from inkwell.models.user import User
from inkwell.shared.database import insert_or_ignore
from inkwell.shared.models import CurrentUser

logger = logging.getLogger(__name__)

Likeable = Post | Comment | Reply

_LIKE_TARGETS = {
    LikeTargetType.POST: (Post, Post.post_id, PostNotFound),
    LikeTargetType.COMMENT: (Comment, Comment.comment_id, CommentNotFound),
    LikeTargetType.REPLY: (Reply, Reply.reply_id, ReplyNotFound),
}


@dataclass(frozen=True)
class LikeOutcome:
    liked: bool
    likes_count: int
    target_type: LikeTargetType
    target_id: UUID
    target: Likeable


# ---------------------------------------------------------------------------
# Counter primitives
# ---------------------------------------------------------------------------


def like_set_size(target_type: LikeTargetType, target_pk):
    """Scalar subquery: number of likes on the target identified by target_pk."""
    return (
        select(func.count())
        .select_from(Like)
        .where(Like.target_type == target_type, Like.target_id == target_pk)
        .scalar_subquery()
    )


def comment_set_size(post_pk):
    return (
        select(func.count())
        .select_from(Comment)
        .where(Comment.post_id == post_pk)
        .scalar_subquery()
    )


async def rewrite_like_count(target_type: LikeTargetType, target_id: UUID, db: AsyncSession) -> None:
    """Set like_count = |likes on target| in one statement. Missing targets are a no-op."""
    model, pk, _ = _LIKE_TARGETS[target_type]
    await db.execute(
        update(model)
        .where(pk == target_id)
        # counter writes leave updated_at untouched
        .values(like_count=like_set_size(target_type, target_id), updated_at=model.updated_at)
        .execution_options(synchronize_session=False)
    )


async def rewrite_comment_count(post_id: UUID, db: AsyncSession) -> None:
    await db.execute(
        update(Post)
        .where(Post.post_id == post_id)
        .values(comment_count=comment_set_size(post_id), updated_at=Post.updated_at)
        .execution_options(synchronize_session=False)
    )


async def _recount_likes(target_type: LikeTargetType, target: Likeable, db: AsyncSession) -> int:
    """Rewrite target.like_count from the like set and read it back."""
    _, pk, _ = _LIKE_TARGETS[target_type]
    await rewrite_like_count(target_type, getattr(target, pk.key), db)
    await db.refresh(target, attribute_names=["like_count"])
    return target.like_count


async def recount_comments(post: Post, db: AsyncSession) -> int:
    """Rewrite post.comment_count from the comment set and read it back."""
    await rewrite_comment_count(post.post_id, db)
    await db.refresh(post, attribute_names=["comment_count"])
    return post.comment_count


# ---------------------------------------------------------------------------
# Like operations
# ---------------------------------------------------------------------------


async def ensure_user_exists(user_id: UUID, db: AsyncSession) -> None:
    """Raise UserNotFound when the token's subject was never provisioned."""
    if await db.get(User, user_id) is None:
        raise UserNotFound()


async def get_like_target(
    target_type: LikeTargetType,
    target_id: UUID,
    db: AsyncSession,
    *,
    for_update: bool = False,
) -> Likeable:
    model, _, not_found = _LIKE_TARGETS[target_type]
    target = await db.get(model, target_id, with_for_update=for_update or None)
    if target is None:
        raise not_found()
    return target


async def lock_counted_rows(target_type: LikeTargetType, target_ids, db: AsyncSession) -> None:
    """Take row locks on the counted rows for a bulk rewrite. Missing ids are skipped."""
    if not target_ids:
        return
    _, pk, _ = _LIKE_TARGETS[target_type]
    # pk order keeps concurrent bulk lockers from deadlocking each other
    await db.execute(select(pk).where(pk.in_(target_ids)).order_by(pk).with_for_update())


async def toggle_like(
    user_id: UUID,
    target_type: LikeTargetType,
    target_id: UUID,
    db: AsyncSession,
) -> LikeOutcome:
    """Flip the user's membership in the target's like set.

    The DELETE doubles as the membership check: if it removed a row the user
    had liked, otherwise the like is inserted (a concurrent duplicate insert
    is ignored). A retried call toggles relative to what is stored.
    """
    await ensure_user_exists(user_id, db)
    # held until commit; the next toggle on this target waits here
    target = await get_like_target(target_type, target_id, db, for_update=True)

    removed = await db.execute(
        delete(Like)
        .where(
            Like.user_id == user_id,
            Like.target_type == target_type,
            Like.target_id == target_id,
        )
        .execution_options(synchronize_session=False)
    )
    if removed.rowcount:
        liked = False
    else:
        await insert_or_ignore(
            db,
            Like,
            {
                "like_id": uuid4(),
                "user_id": user_id,
                "target_type": target_type,
                "target_id": target_id,
            },
            ["user_id", "target_type", "target_id"],
        )
        liked = True

    likes_count = await _recount_likes(target_type, target, db)
    return LikeOutcome(
        liked=liked,
        likes_count=likes_count,
        target_type=target_type,
        target_id=target_id,
        target=target,
    )


async def has_liked(
    user_id: UUID, target_type: LikeTargetType, target_id: UUID, db: AsyncSession
) -> bool:
    result = await db.execute(
        select(Like.like_id).where(
            Like.user_id == user_id,
            Like.target_type == target_type,
            Like.target_id == target_id,
        )
    )
    return result.first() is not None


async def delete_likes_on(target_type: LikeTargetType, target_ids, db: AsyncSession) -> None:
    """Remove every like on the given targets. target_ids may be a list or a subquery."""
    await db.execute(
        delete(Like)
        .where(Like.target_type == target_type, Like.target_id.in_(target_ids))
        .execution_options(synchronize_session=False)
    )


# ---------------------------------------------------------------------------
# Comment operations
# ---------------------------------------------------------------------------


async def _get_post(post_id: UUID, db: AsyncSession, *, for_update: bool = False) -> Post:
    post = await db.get(Post, post_id, with_for_update=for_update or None)
    if post is None:
        raise PostNotFound()
    return post


async def get_comment(comment_id: UUID, db: AsyncSession) -> Comment:
    result = await db.execute(select(Comment).where(Comment.comment_id == comment_id))
    comment = result.scalar_one_or_none()
    if comment is None:
        raise CommentNotFound()
    return comment


async def list_comments(
    post_id: UUID,
    db: AsyncSession,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Comment], int]:
    """Return comments for a post with their replies, oldest first."""
    await _get_post(post_id, db)
    base = select(Comment).where(Comment.post_id == post_id)
    total_result = await db.execute(select(func.count()).select_from(base.subquery()))
    total = total_result.scalar_one()
    result = await db.execute(
        base.order_by(Comment.created_at.asc(), Comment.comment_id.asc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def _check_comment_rate(
    author_id: UUID,
    redis: aioredis.Redis | None,
    limit: int,
    window_seconds: int,
) -> None:
    if redis is None:
        return
    rate_key = COMMENT_RATE_KEY.format(user_id=author_id)
    count = await redis.incr(rate_key)
    if count == 1:
        await redis.expire(rate_key, window_seconds)
    if count > limit:
        raise CommentRateLimited(limit, window_seconds)


async def add_comment(
    post_id: UUID,
    author_id: UUID,
    body: str,
    db: AsyncSession,
    redis: aioredis.Redis | None = None,
    *,
    rate_limit: int = COMMENT_RATE_LIMIT,
    rate_window: int = COMMENT_RATE_WINDOW,
) -> tuple[Comment, Post]:
    """Create a comment and rewrite the post's comment_count from the comment set."""
    await ensure_user_exists(author_id, db)
    post = await _get_post(post_id, db, for_update=True)
    await _check_comment_rate(author_id, redis, rate_limit, rate_window)

    comment = Comment(post_id=post_id, author_id=author_id, body=body, like_count=0, replies=[])
    db.add(comment)
    await db.flush()

    await recount_comments(post, db)
    return comment, post


async def update_comment(
    comment_id: UUID,
    actor: CurrentUser,
    body: str,
    db: AsyncSession,
) -> Comment:
    comment = await get_comment(comment_id, db)
    ensure_can_modify(actor, comment.author_id, "edit this comment")
    comment.body = body
    await db.flush()
    return comment


async def delete_comment(
    comment_id: UUID,
    actor: CurrentUser,
    db: AsyncSession,
) -> None:
    """Delete a comment, its replies and every like on either.

    All statements run in the caller's transaction; a failure anywhere rolls
    the whole unit back, leaving neither dangling replies nor a stale
    comment_count.
    """
    comment = await get_comment(comment_id, db)
    ensure_can_modify(actor, comment.author_id, "delete this comment")
    post = await _get_post(comment.post_id, db, for_update=True)

    await purge_comments(select(Comment.comment_id).where(Comment.comment_id == comment_id), db)
    await recount_comments(post, db)
    logger.info("Comment %s deleted by %s", comment_id, actor.id)


async def purge_comments(comment_ids, db: AsyncSession) -> None:
    """Hard-delete the selected comments together with their replies and likes.

    comment_ids is a SELECT of comment ids. Counters on the parent posts are
    left to the caller.
    """
    reply_ids = select(Reply.reply_id).where(Reply.comment_id.in_(comment_ids))
    await delete_likes_on(LikeTargetType.REPLY, reply_ids, db)
    await delete_likes_on(LikeTargetType.COMMENT, comment_ids, db)
    await db.execute(
        delete(Reply)
        .where(Reply.comment_id.in_(comment_ids))
        .execution_options(synchronize_session="fetch")
    )
    await db.execute(
        delete(Comment)
        .where(Comment.comment_id.in_(comment_ids))
        .execution_options(synchronize_session="fetch")
    )


# ---------------------------------------------------------------------------
# Reply operations
# ---------------------------------------------------------------------------


async def get_reply(comment_id: UUID, reply_id: UUID, db: AsyncSession) -> Reply:
    """Return the reply, checking it belongs to comment_id."""
    await get_comment(comment_id, db)
    result = await db.execute(
        select(Reply).where(Reply.reply_id == reply_id, Reply.comment_id == comment_id)
    )
    reply = result.scalar_one_or_none()
    if reply is None:
        raise ReplyNotFound()
    return reply


async def add_reply(
    comment_id: UUID,
    author_id: UUID,
    body: str,
    db: AsyncSession,
) -> tuple[Reply, Comment]:
    await ensure_user_exists(author_id, db)
    comment = await get_comment(comment_id, db)
    reply = Reply(comment_id=comment_id, author_id=author_id, body=body, like_count=0)
    db.add(reply)
    await db.flush()
    return reply, comment


async def update_reply(
    comment_id: UUID,
    reply_id: UUID,
    actor: CurrentUser,
    body: str,
    db: AsyncSession,
) -> Reply:
    reply = await get_reply(comment_id, reply_id, db)
    ensure_can_modify(actor, reply.author_id, "edit this reply")
    reply.body = body
    await db.flush()
    return reply


async def delete_reply(
    comment_id: UUID,
    reply_id: UUID,
    actor: CurrentUser,
    db: AsyncSession,
) -> None:
    reply = await get_reply(comment_id, reply_id, db)
    ensure_can_modify(actor, reply.author_id, "delete this reply")
    await delete_likes_on(LikeTargetType.REPLY, [reply_id], db)
    await db.execute(
        delete(Reply)
        .where(Reply.reply_id == reply_id)
        .execution_options(synchronize_session="fetch")
    )
    logger.info("Reply %s on comment %s deleted by %s", reply_id, comment_id, actor.id)


async def toggle_reply_like(
    comment_id: UUID,
    reply_id: UUID,
    user_id: UUID,
    db: AsyncSession,
) -> LikeOutcome:
    await get_reply(comment_id, reply_id, db)
    return await toggle_like(user_id, LikeTargetType.REPLY, reply_id, db)
