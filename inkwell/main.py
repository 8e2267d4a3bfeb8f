import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from inkwell.config import get_settings
from inkwell.database import close_db, init_db
from inkwell.engagement.admin_router import router as engagement_admin_router
from inkwell.engagement.router import router as engagement_router
from inkwell.notifications.router import router as notifications_router
from inkwell.posts.router import router as posts_router
from inkwell.profile.admin_router import router as profile_admin_router
from inkwell.profile.internal_router import router as profile_internal_router
from inkwell.profile.router import router as profile_router
from inkwell.rate_limit import limiter
from inkwell.redis_client import close_redis
from inkwell.shared.middleware import (
    RequestIdLogFilter,
    error_envelope_middleware,
    request_id_middleware,
)
from inkwell.social_graph.router import router as social_router

_LOG_FORMAT = "%(levelname)s:%(name)s:[%(request_id)s] %(message)s"

_TAGS_METADATA = [
    {"name": "social-graph", "description": "Follow / unfollow and follower lists."},
    {
        "name": "engagement",
        "description": (
            "Likes on posts, comments and replies; comment and reply lifecycle. "
            "Every counter is recomputed from its like or comment set."
        ),
    },
    {"name": "posts", "description": "Post CRUD and liked-posts listing."},
    {"name": "profile", "description": "Public profiles and own-profile updates."},
    {"name": "notifications", "description": "Notification inbox of the current user."},
    {"name": "admin", "description": "Administrator operations. Requires ADMIN or SUPER_ADMIN."},
    {"name": "internal", "description": "Service-to-service provisioning."},
    {"name": "health", "description": "Liveness probe."},
]


class HealthResponse(BaseModel):
    status: str
    service: str


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestIdLogFilter())


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.database_url)
    yield
    await close_redis()
    await close_db()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Inkwell API",
        version="1.0.0",
        description=(
            "Blogging platform backend: social graph, likes, comments, replies "
            "and notifications."
        ),
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(profile_router, prefix="/api/v1")
    app.include_router(social_router, prefix="/api/v1")
    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(engagement_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")
    app.include_router(profile_admin_router, prefix="/api/v1")
    app.include_router(engagement_admin_router, prefix="/api/v1")
    app.include_router(profile_internal_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        """Lightweight liveness probe. Does not hit the database."""
        return HealthResponse(status="ok", service="inkwell")

    return app


app = create_app()
