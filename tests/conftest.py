from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from inkwell.config import Settings, get_settings
from inkwell.database import set_session_factory
from inkwell.main import app
from inkwell.models import User
from inkwell.rate_limit import limiter
from inkwell.redis_client import get_redis
from inkwell.shared.auth.config import AuthSettings
from inkwell.shared.auth.dependencies import get_auth_settings
from inkwell.shared.constants import Role
from inkwell.shared.database import Base, get_async_engine
from inkwell.shared.models import CurrentUser

# Every test gets a fresh in-memory database; StaticPool keeps the single
# connection alive for the engine's lifetime.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_AUTH = AuthSettings(
    secret="test-secret",
    algorithm="HS256",
    issuer="inkwell-auth",
    audience="inkwell-services",
)
INTERNAL_TOKEN = "internal-test-token"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = get_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    set_session_factory(session_factory)
    app.dependency_overrides[get_auth_settings] = lambda: TEST_AUTH
    app.dependency_overrides[get_settings] = lambda: Settings(
        internal_api_token=INTERNAL_TOKEN, redis_enabled=False
    )

    async def _no_redis():
        yield None

    app.dependency_overrides[get_redis] = _no_redis
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ── Factories ─────────────────────────────────────────────────────────────────

def make_token(user_id: UUID, roles: list[Role] | None = None, email: str = "") -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "roles": [r.value for r in (roles or [Role.USER])],
        "iss": TEST_AUTH.issuer,
        "aud": TEST_AUTH.audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=15)).timestamp()),
    }
    return jwt.encode(payload, TEST_AUTH.secret, algorithm=TEST_AUTH.algorithm)


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    def _headers(user: User, *, admin: bool = False) -> dict[str, str]:
        roles = [Role.USER, Role.ADMIN] if admin else [Role.USER]
        return {"Authorization": f"Bearer {make_token(user.id, roles, user.email)}"}

    return _headers


@pytest.fixture
def actor() -> Callable[..., CurrentUser]:
    """CurrentUser for service-level calls."""

    def _actor(user: User, *, admin: bool = False) -> CurrentUser:
        roles = [Role.USER, Role.ADMIN] if admin else [Role.USER]
        return CurrentUser(id=user.id, email=user.email, roles=roles)

    return _actor


@pytest.fixture
def make_user(session_factory: async_sessionmaker[AsyncSession]):
    """Insert and commit a user in its own session; returns the detached row."""

    async def _make(username: str | None = None, role: Role = Role.USER) -> User:
        username = username or f"user_{uuid4().hex[:8]}"
        async with session_factory() as session:
            user = User(username=username, email=f"{username}@example.com", role=role)
            session.add(user)
            await session.commit()
            return user

    return _make
