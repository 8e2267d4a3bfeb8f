"""Posts controller: orchestration between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.engagement.service import has_liked
from inkwell.models.enums import LikeTargetType
from inkwell.models.post import Post
from inkwell.posts import service
from inkwell.posts.schemas import (
    CreatePostRequest,
    PostListResponse,
    PostResponse,
    UpdatePostRequest,
)
from inkwell.shared.models import CurrentUser


def _to_response(post: Post, is_liked: bool = False) -> PostResponse:
    return PostResponse.model_validate(post).model_copy(update={"is_liked": is_liked})


async def create_post(
    payload: CreatePostRequest, author_id: UUID, db: AsyncSession
) -> PostResponse:
    return _to_response(await service.create_post(author_id, payload, db))


async def get_post(
    post_id: UUID, viewer_id: UUID | None, db: AsyncSession
) -> PostResponse:
    post = await service.get_post(post_id, db)
    liked = False
    if viewer_id is not None:
        liked = await has_liked(viewer_id, LikeTargetType.POST, post_id, db)
    return _to_response(post, liked)


async def update_post(
    post_id: UUID, payload: UpdatePostRequest, actor: CurrentUser, db: AsyncSession
) -> PostResponse:
    post = await service.update_post(post_id, actor, payload, db)
    liked = await has_liked(actor.id, LikeTargetType.POST, post_id, db)
    return _to_response(post, liked)


async def delete_post(post_id: UUID, actor: CurrentUser, db: AsyncSession) -> None:
    await service.delete_post(post_id, actor, db)


async def list_liked_posts(
    user_id: UUID, db: AsyncSession, limit: int, offset: int
) -> PostListResponse:
    posts, total = await service.list_liked_posts(user_id, db, limit=limit, offset=offset)
    return PostListResponse(
        items=[_to_response(p, True) for p in posts],
        total=total,
        limit=limit,
        offset=offset,
    )


async def _listing(
    posts: list[Post], total: int, viewer_id: UUID | None, db: AsyncSession, limit: int, offset: int
) -> PostListResponse:
    liked = set()
    if viewer_id is not None:
        liked = await service.liked_post_ids(viewer_id, [p.post_id for p in posts], db)
    return PostListResponse(
        items=[_to_response(p, p.post_id in liked) for p in posts],
        total=total,
        limit=limit,
        offset=offset,
    )


async def list_posts(
    viewer_id: UUID | None,
    db: AsyncSession,
    category: str | None,
    q: str | None,
    limit: int,
    offset: int,
) -> PostListResponse:
    posts, total = await service.list_posts(db, category=category, q=q, limit=limit, offset=offset)
    return await _listing(posts, total, viewer_id, db, limit, offset)


async def list_posts_by_author(
    author_id: UUID, viewer_id: UUID | None, db: AsyncSession, limit: int, offset: int
) -> PostListResponse:
    posts, total = await service.list_posts_by_author(author_id, db, limit=limit, offset=offset)
    return await _listing(posts, total, viewer_id, db, limit, offset)
