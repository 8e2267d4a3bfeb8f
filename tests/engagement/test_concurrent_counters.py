"""Interleaved writers from different users against a real Postgres.

SQLite serializes whole transactions, so these only mean something on a
server with row locks. Set INKWELL_TEST_POSTGRES_URL to a throwaway
database (postgresql+asyncpg://...) to run them; the schema is created and
dropped around each test.
"""

import asyncio
import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inkwell.engagement import service
from inkwell.models import Comment, Like, Post, User
from inkwell.models.enums import LikeTargetType
from inkwell.shared.database import Base, get_async_engine

POSTGRES_URL = os.environ.get("INKWELL_TEST_POSTGRES_URL", "")

pytestmark = [
    pytest.mark.postgres,
    pytest.mark.skipif(not POSTGRES_URL, reason="INKWELL_TEST_POSTGRES_URL not set"),
]

# Long enough for the second writer to reach the row lock
BLOCK_WAIT = 0.3


@pytest_asyncio.fixture
async def pg_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = get_async_engine(POSTGRES_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


async def _seed(factory: async_sessionmaker[AsyncSession]) -> tuple[User, User, Post]:
    async with factory() as session:
        ada = User(username="ada", email="ada@example.com")
        carol = User(username="carol", email="carol@example.com")
        dave = User(username="dave", email="dave@example.com")
        session.add_all([ada, carol, dave])
        await session.flush()
        post = Post(author_id=ada.id, title="Shared", body="b", like_count=0, comment_count=0)
        session.add(post)
        await session.commit()
        return carol, dave, post


async def _stored_and_actual(factory, counter, set_query) -> tuple[int, int]:
    async with factory() as session:
        stored = (await session.execute(select(counter))).scalar_one()
        actual = (await session.execute(set_query)).scalar_one()
        return stored, actual


@pytest.mark.asyncio
async def test_interleaved_likes_are_all_counted(pg_factory) -> None:
    carol, dave, post = await _seed(pg_factory)

    async with pg_factory() as first, pg_factory() as second:
        await service.toggle_like(carol.id, LikeTargetType.POST, post.post_id, first)
        blocked = asyncio.create_task(
            service.toggle_like(dave.id, LikeTargetType.POST, post.post_id, second)
        )
        await asyncio.sleep(BLOCK_WAIT)
        assert not blocked.done()

        await first.commit()
        outcome = await asyncio.wait_for(blocked, timeout=10)
        await second.commit()

    assert outcome.liked is True
    assert outcome.likes_count == 2
    stored, actual = await _stored_and_actual(
        pg_factory,
        Post.like_count,
        select(func.count()).select_from(Like).where(Like.target_id == post.post_id),
    )
    assert stored == actual == 2


@pytest.mark.asyncio
async def test_interleaved_comments_are_all_counted(pg_factory) -> None:
    carol, dave, post = await _seed(pg_factory)

    async with pg_factory() as first, pg_factory() as second:
        await service.add_comment(post.post_id, carol.id, "first", first)
        blocked = asyncio.create_task(service.add_comment(post.post_id, dave.id, "second", second))
        await asyncio.sleep(BLOCK_WAIT)
        assert not blocked.done()

        await first.commit()
        _, updated = await asyncio.wait_for(blocked, timeout=10)
        await second.commit()

    assert updated.comment_count == 2
    stored, actual = await _stored_and_actual(
        pg_factory,
        Post.comment_count,
        select(func.count()).select_from(Comment).where(Comment.post_id == post.post_id),
    )
    assert stored == actual == 2
