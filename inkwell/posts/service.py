"""Posts service: pure business logic, no FastAPI imports.

Deleting a post removes its likes, its comments, their replies and every
like on those in the caller's transaction.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.permissions import ensure_can_modify
from inkwell.engagement.service import delete_likes_on, purge_comments
from inkwell.exceptions import PostNotFound, UserNotFound
from inkwell.models.comment import Comment
from inkwell.models.enums import LikeTargetType
from inkwell.models.like import Like
from inkwell.models.post import Post
from inkwell.models.user import User
from inkwell.posts.schemas import CreatePostRequest, UpdatePostRequest
from inkwell.shared.models import CurrentUser

logger = logging.getLogger(__name__)

# Explicit nulls for these are ignored on update
_REQUIRED_FIELDS = frozenset({"title", "body"})


async def create_post(author_id: UUID, payload: CreatePostRequest, db: AsyncSession) -> Post:
    if await db.get(User, author_id) is None:
        raise UserNotFound()
    post = Post(
        author_id=author_id,
        title=payload.title,
        body=payload.body,
        cover_image_url=payload.cover_image_url,
        category=payload.category,
        tags=payload.tags,
        like_count=0,
        comment_count=0,
    )
    db.add(post)
    await db.flush()
    return post


async def get_post(post_id: UUID, db: AsyncSession) -> Post:
    post = await db.get(Post, post_id)
    if post is None:
        raise PostNotFound()
    return post


async def update_post(
    post_id: UUID,
    actor: CurrentUser,
    payload: UpdatePostRequest,
    db: AsyncSession,
) -> Post:
    post = await get_post(post_id, db)
    ensure_can_modify(actor, post.author_id, "edit this post")
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(post, field, value)
    await db.flush()
    return post


async def purge_post_ids(post_ids, db: AsyncSession) -> None:
    """Hard-delete the selected posts with their comments, replies and likes.

    post_ids is a SELECT of post ids.
    """
    await purge_comments(select(Comment.comment_id).where(Comment.post_id.in_(post_ids)), db)
    await delete_likes_on(LikeTargetType.POST, post_ids, db)
    await db.execute(
        delete(Post)
        .where(Post.post_id.in_(post_ids))
        .execution_options(synchronize_session="fetch")
    )


async def delete_post(post_id: UUID, actor: CurrentUser, db: AsyncSession) -> None:
    post = await get_post(post_id, db)
    ensure_can_modify(actor, post.author_id, "delete this post")
    await purge_post_ids(select(Post.post_id).where(Post.post_id == post_id), db)
    logger.info("Post %s deleted by %s", post_id, actor.id)


async def list_liked_posts(
    user_id: UUID,
    db: AsyncSession,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Post], int]:
    """Posts the user likes, most recently liked first."""
    base = (
        select(Post)
        .join(
            Like,
            (Like.target_id == Post.post_id) & (Like.target_type == LikeTargetType.POST),
        )
        .where(Like.user_id == user_id)
    )
    total_result = await db.execute(select(func.count()).select_from(base.subquery()))
    total = total_result.scalar_one()
    result = await db.execute(
        base.order_by(Like.created_at.desc(), Like.like_id).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def _page(base, db: AsyncSession, limit: int, offset: int) -> tuple[list[Post], int]:
    total_result = await db.execute(select(func.count()).select_from(base.subquery()))
    total = total_result.scalar_one()
    result = await db.execute(
        base.order_by(Post.created_at.desc(), Post.post_id).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


async def list_posts(
    db: AsyncSession,
    *,
    category: str | None = None,
    q: str | None = None,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Post], int]:
    """Newest first. q matches title or body case-insensitively; category is exact."""
    base = select(Post)
    if category:
        base = base.where(Post.category == category)
    if q:
        pattern = f"%{_escape_like(q)}%"
        base = base.where(
            or_(Post.title.ilike(pattern, escape="\\"), Post.body.ilike(pattern, escape="\\"))
        )
    return await _page(base, db, limit, offset)


async def list_posts_by_author(
    author_id: UUID,
    db: AsyncSession,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[Post], int]:
    if await db.get(User, author_id) is None:
        raise UserNotFound()
    return await _page(select(Post).where(Post.author_id == author_id), db, limit, offset)


async def liked_post_ids(user_id: UUID, post_ids: list[UUID], db: AsyncSession) -> set[UUID]:
    """The subset of post_ids the user likes."""
    if not post_ids:
        return set()
    result = await db.execute(
        select(Like.target_id).where(
            Like.user_id == user_id,
            Like.target_type == LikeTargetType.POST,
            Like.target_id.in_(post_ids),
        )
    )
    return set(result.scalars().all())
