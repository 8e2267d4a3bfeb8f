"""Engagement controller: orchestration between router and service.

Notifications are emitted here, after the primary write, and never affect
the response.
"""

from uuid import UUID

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.config import Settings
from inkwell.engagement import service
from inkwell.engagement.schemas import (
    CommentListResponse,
    CommentResponse,
    ReplyResponse,
    ToggleLikeResponse,
)
from inkwell.models.comment import Comment, Reply
from inkwell.models.enums import LikeTargetType, NotificationType
from inkwell.models.post import Post
from inkwell.notifications import emitter
from inkwell.shared.models import CurrentUser


def _like_response(outcome: service.LikeOutcome) -> ToggleLikeResponse:
    return ToggleLikeResponse(
        liked=outcome.liked,
        likes_count=outcome.likes_count,
        target_type=outcome.target_type,
        target_id=outcome.target_id,
    )


async def _notify_like(outcome: service.LikeOutcome, user_id: UUID, db: AsyncSession) -> None:
    target = outcome.target
    if not outcome.liked or target.author_id == user_id:
        return
    name = await emitter.sender_name(db, user_id)
    if isinstance(target, Post):
        post_id, comment_id, what = target.post_id, None, "post"
    elif isinstance(target, Comment):
        post_id, comment_id, what = target.post_id, target.comment_id, "comment"
    else:
        post_id, comment_id, what = None, target.comment_id, "reply"
    await emitter.emit(
        db,
        recipient_id=target.author_id,
        sender_id=user_id,
        type_=NotificationType.LIKE,
        message=f"{name} liked your {what}",
        post_id=post_id,
        comment_id=comment_id,
    )


# ---------------------------------------------------------------------------
# Like controllers
# ---------------------------------------------------------------------------


async def toggle_post_like(post_id: UUID, user_id: UUID, db: AsyncSession) -> ToggleLikeResponse:
    outcome = await service.toggle_like(user_id, LikeTargetType.POST, post_id, db)
    await _notify_like(outcome, user_id, db)
    return _like_response(outcome)


async def toggle_comment_like(
    comment_id: UUID, user_id: UUID, db: AsyncSession
) -> ToggleLikeResponse:
    outcome = await service.toggle_like(user_id, LikeTargetType.COMMENT, comment_id, db)
    await _notify_like(outcome, user_id, db)
    return _like_response(outcome)


async def toggle_reply_like(
    comment_id: UUID, reply_id: UUID, user_id: UUID, db: AsyncSession
) -> ToggleLikeResponse:
    outcome = await service.toggle_reply_like(comment_id, reply_id, user_id, db)
    await _notify_like(outcome, user_id, db)
    return _like_response(outcome)


# ---------------------------------------------------------------------------
# Comment controllers
# ---------------------------------------------------------------------------


async def list_comments(
    post_id: UUID,
    db: AsyncSession,
    limit: int = 20,
    offset: int = 0,
) -> CommentListResponse:
    comments, total = await service.list_comments(post_id, db, limit=limit, offset=offset)
    return CommentListResponse(
        items=[CommentResponse.model_validate(c) for c in comments],
        total=total,
        limit=limit,
        offset=offset,
    )


async def get_comment(comment_id: UUID, db: AsyncSession) -> CommentResponse:
    return CommentResponse.model_validate(await service.get_comment(comment_id, db))


async def add_comment(
    post_id: UUID,
    body: str,
    author_id: UUID,
    db: AsyncSession,
    redis: aioredis.Redis | None,
    settings: Settings,
) -> CommentResponse:
    comment, post = await service.add_comment(
        post_id,
        author_id,
        body,
        db,
        redis,
        rate_limit=settings.comment_rate_limit,
        rate_window=settings.comment_rate_window_seconds,
    )
    if post.author_id != author_id:
        name = await emitter.sender_name(db, author_id)
        await emitter.emit(
            db,
            recipient_id=post.author_id,
            sender_id=author_id,
            type_=NotificationType.COMMENT,
            message=f"{name} commented on your post",
            post_id=post.post_id,
            comment_id=comment.comment_id,
        )
    return CommentResponse.model_validate(comment)


async def update_comment(
    comment_id: UUID, body: str, actor: CurrentUser, db: AsyncSession
) -> CommentResponse:
    comment = await service.update_comment(comment_id, actor, body, db)
    return CommentResponse.model_validate(comment)


async def delete_comment(comment_id: UUID, actor: CurrentUser, db: AsyncSession) -> None:
    await service.delete_comment(comment_id, actor, db)


# ---------------------------------------------------------------------------
# Reply controllers
# ---------------------------------------------------------------------------


async def add_reply(
    comment_id: UUID, body: str, author_id: UUID, db: AsyncSession
) -> ReplyResponse:
    reply, comment = await service.add_reply(comment_id, author_id, body, db)
    if comment.author_id != author_id:
        name = await emitter.sender_name(db, author_id)
        await emitter.emit(
            db,
            recipient_id=comment.author_id,
            sender_id=author_id,
            type_=NotificationType.REPLY,
            message=f"{name} replied to your comment",
            post_id=comment.post_id,
            comment_id=comment.comment_id,
        )
    return ReplyResponse.model_validate(reply)


async def update_reply(
    comment_id: UUID, reply_id: UUID, body: str, actor: CurrentUser, db: AsyncSession
) -> ReplyResponse:
    reply: Reply = await service.update_reply(comment_id, reply_id, actor, body, db)
    return ReplyResponse.model_validate(reply)


async def delete_reply(
    comment_id: UUID, reply_id: UUID, actor: CurrentUser, db: AsyncSession
) -> None:
    await service.delete_reply(comment_id, reply_id, actor, db)
