"""Engagement router: likes, comments and replies.

Zero business logic; delegates entirely to controller.

Routes:
  PUT    /posts/{post_id}/like                          Toggle like on a post
  GET    /posts/{post_id}/comments                      List comments (with replies)
  POST   /posts/{post_id}/comments                      Add a comment
  GET    /comments/{comment_id}                         Read a comment
  PUT    /comments/{comment_id}                         Edit a comment (author/admin)
  DELETE /comments/{comment_id}                         Delete a comment + replies + likes
  POST   /comments/{comment_id}/like                    Toggle like on a comment
  POST   /comments/{comment_id}/replies                 Add a reply
  PUT    /comments/{comment_id}/replies/{reply_id}      Edit a reply (author/admin)
  DELETE /comments/{comment_id}/replies/{reply_id}      Delete a reply
  POST   /comments/{comment_id}/replies/{reply_id}/like Toggle like on a reply
"""

from uuid import UUID

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import get_current_user
from inkwell.config import Settings, get_settings
from inkwell.database import get_db
from inkwell.engagement import controller
from inkwell.engagement.schemas import (
    CommentBodyRequest,
    CommentListResponse,
    CommentResponse,
    ReplyResponse,
    ToggleLikeResponse,
)
from inkwell.redis_client import get_redis
from inkwell.shared.models import CurrentUser

router = APIRouter(tags=["engagement"])

_404 = {"description": "Not found"}
_403 = {"description": "Forbidden: not the author or an admin"}
_429 = {"description": "Rate limit exceeded"}


# ---------------------------------------------------------------------------
# Post likes and comments
# ---------------------------------------------------------------------------


@router.put(
    "/posts/{post_id}/like",
    response_model=ToggleLikeResponse,
    summary="Like or unlike a post",
    description=(
        "Strict toggle relative to the stored state. likes_count is recomputed "
        "from the like set on every call."
    ),
    responses={404: _404},
)
async def toggle_post_like(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ToggleLikeResponse:
    return await controller.toggle_post_like(post_id, current_user.id, db)


@router.get(
    "/posts/{post_id}/comments",
    response_model=CommentListResponse,
    summary="List comments on a post",
    description="Comments with their replies, oldest first.",
    responses={404: _404},
)
async def list_comments(
    post_id: UUID,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> CommentListResponse:
    return await controller.list_comments(post_id, db, limit=limit, offset=offset)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment to a post",
    description="Max length: 2,000 chars. Rate limited per user when Redis is enabled.",
    responses={404: _404, 429: _429},
)
async def add_comment(
    post_id: UUID,
    payload: CommentBodyRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis | None = Depends(get_redis),
    settings: Settings = Depends(get_settings),
) -> CommentResponse:
    return await controller.add_comment(
        post_id, payload.body, current_user.id, db, redis, settings
    )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@router.get(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Get a comment",
    responses={404: _404},
)
async def get_comment(
    comment_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    return await controller.get_comment(comment_id, db)


@router.put(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Edit a comment",
    responses={404: _404, 403: _403},
)
async def update_comment(
    comment_id: UUID,
    payload: CommentBodyRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    return await controller.update_comment(comment_id, payload.body, current_user, db)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    description="Removes the comment, its replies and all their likes in one transaction.",
    responses={404: _404, 403: _403},
)
async def delete_comment(
    comment_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_comment(comment_id, current_user, db)


@router.post(
    "/comments/{comment_id}/like",
    response_model=ToggleLikeResponse,
    summary="Like or unlike a comment",
    responses={404: _404},
)
async def toggle_comment_like(
    comment_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ToggleLikeResponse:
    return await controller.toggle_comment_like(comment_id, current_user.id, db)


# ---------------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------------


@router.post(
    "/comments/{comment_id}/replies",
    response_model=ReplyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to a comment",
    responses={404: _404},
)
async def add_reply(
    comment_id: UUID,
    payload: CommentBodyRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ReplyResponse:
    return await controller.add_reply(comment_id, payload.body, current_user.id, db)


@router.put(
    "/comments/{comment_id}/replies/{reply_id}",
    response_model=ReplyResponse,
    summary="Edit a reply",
    responses={404: _404, 403: _403},
)
async def update_reply(
    comment_id: UUID,
    reply_id: UUID,
    payload: CommentBodyRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ReplyResponse:
    return await controller.update_reply(comment_id, reply_id, payload.body, current_user, db)


@router.delete(
    "/comments/{comment_id}/replies/{reply_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a reply",
    responses={404: _404, 403: _403},
)
async def delete_reply(
    comment_id: UUID,
    reply_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_reply(comment_id, reply_id, current_user, db)


@router.post(
    "/comments/{comment_id}/replies/{reply_id}/like",
    response_model=ToggleLikeResponse,
    summary="Like or unlike a reply",
    responses={404: _404},
)
async def toggle_reply_like(
    comment_id: UUID,
    reply_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ToggleLikeResponse:
    return await controller.toggle_reply_like(comment_id, reply_id, current_user.id, db)
