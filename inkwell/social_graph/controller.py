"""
Social graph domain: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.models.enums import NotificationType
from inkwell.notifications import emitter
from inkwell.social_graph import service as svc
from inkwell.social_graph.schemas import (
    FollowActionResponse,
    FollowListItem,
    FollowListResponse,
    IsFollowingResponse,
    SocialUserRef,
    UnfollowActionResponse,
)


async def follow_user(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> FollowActionResponse:
    outcome = await svc.follow(session, follower_id, following_id)
    if outcome.followed:
        await emitter.emit(
            session,
            recipient_id=following_id,
            sender_id=follower_id,
            type_=NotificationType.FOLLOW,
            message=f"{outcome.actor.username} started following you",
        )
    return FollowActionResponse(
        followed=outcome.followed,
        is_following=outcome.is_following,
        followers_count=outcome.followers_count,
        message=outcome.message,
    )


async def unfollow_user(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> UnfollowActionResponse:
    outcome = await svc.unfollow(session, follower_id, following_id)
    return UnfollowActionResponse(
        unfollowed=outcome.unfollowed,
        is_following=outcome.is_following,
        followers_count=outcome.followers_count,
        message=outcome.message,
    )


async def is_following(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> IsFollowingResponse:
    return IsFollowingResponse(
        is_following=await svc.is_following(session, follower_id, following_id)
    )


def _to_response(rows, total: int, page: int, size: int | None) -> FollowListResponse:
    items = [
        FollowListItem(
            id=f.follow_id,
            user=SocialUserRef.model_validate(u),
            created_at=f.created_at,
            is_followed_by_me=is_followed,
        )
        for f, u, is_followed in rows
    ]
    return FollowListResponse(items=items, total=total, page=page, size=size)


async def list_following(
    session: AsyncSession,
    user_id: uuid.UUID,
    viewer_id: uuid.UUID | None,
    page: int,
    size: int | None,
) -> FollowListResponse:
    rows, total = await svc.get_following(
        session, user_id, viewer_id=viewer_id, page=page, size=size
    )
    return _to_response(rows, total, page, size)


async def list_followers(
    session: AsyncSession,
    user_id: uuid.UUID,
    viewer_id: uuid.UUID | None,
    page: int,
    size: int | None,
) -> FollowListResponse:
    rows, total = await svc.get_followers(
        session, user_id, viewer_id=viewer_id, page=page, size=size
    )
    return _to_response(rows, total, page, size)
