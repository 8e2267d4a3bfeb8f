"""Posts router: /api/v1/posts.

/liked and /user/{user_id} are registered before /{post_id} so the literal
paths win.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import get_current_user, get_optional_user
from inkwell.database import get_db
from inkwell.posts import controller
from inkwell.posts.schemas import (
    CreatePostRequest,
    PostListResponse,
    PostResponse,
    UpdatePostRequest,
)
from inkwell.shared.models import CurrentUser

router = APIRouter(prefix="/posts", tags=["posts"])

_404 = {"description": "Not found"}
_403 = {"description": "Forbidden: not the author or an admin"}


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
)
async def create_post(
    payload: CreatePostRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    return await controller.create_post(payload, current_user.id, db)


@router.get(
    "",
    response_model=PostListResponse,
    summary="Browse posts",
    description=(
        "Newest first. `q` searches title and body (case-insensitive); "
        "`category` must match exactly."
    ),
)
async def list_posts(
    q: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None, max_length=50),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    current_user: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    viewer_id = current_user.id if current_user else None
    return await controller.list_posts(viewer_id, db, category, q, limit, offset)


@router.get(
    "/user/{user_id}",
    response_model=PostListResponse,
    summary="Posts by an author",
    description="Newest first.",
    responses={404: _404},
)
async def list_posts_by_author(
    user_id: UUID,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    current_user: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    viewer_id = current_user.id if current_user else None
    return await controller.list_posts_by_author(user_id, viewer_id, db, limit, offset)


@router.get(
    "/liked",
    response_model=PostListResponse,
    summary="Posts I liked",
    description="Most recently liked first.",
)
async def list_liked_posts(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    return await controller.list_liked_posts(current_user.id, db, limit=limit, offset=offset)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="Get a post",
    description="`is_liked` reflects the caller when a token is supplied.",
    responses={404: _404},
)
async def get_post(
    post_id: UUID,
    current_user: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    viewer_id = current_user.id if current_user else None
    return await controller.get_post(post_id, viewer_id, db)


@router.patch(
    "/{post_id}",
    response_model=PostResponse,
    summary="Edit a post",
    responses={404: _404, 403: _403},
)
async def update_post(
    post_id: UUID,
    payload: UpdatePostRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    return await controller.update_post(post_id, payload, current_user, db)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a post",
    description="Also deletes its likes, comments, replies and their likes.",
    responses={404: _404, 403: _403},
)
async def delete_post(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.delete_post(post_id, current_user, db)
