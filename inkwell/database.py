"""
Process-wide session factory and the per-request ``get_db`` dependency.

One request is one unit of work: the session commits when the route returns
and rolls back if anything raised, so a failed write never leaves a partial
cascade or a stale counter behind.
"""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inkwell.shared.database import get_async_session_factory

# Registers every table on Base.metadata (create_all, Alembic autogenerate)
import inkwell.models  # noqa: F401

_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(database_url: str) -> async_sessionmaker[AsyncSession]:
    return set_session_factory(
        get_async_session_factory(database_url, expire_on_commit=False)
    )


def set_session_factory(
    factory: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    """Install a factory built elsewhere (tests bind one to an in-memory database)."""
    global _session_factory
    _session_factory = factory
    return factory


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized; call init_db() first")
    return _session_factory


async def close_db() -> None:
    global _session_factory
    if _session_factory is None:
        return
    bind = _session_factory.kw.get("bind")
    if bind is not None:
        await bind.dispose()
    _session_factory = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        else:
            await session.commit()
