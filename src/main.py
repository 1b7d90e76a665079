"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 4000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text
from strawberry.fastapi import GraphQLRouter

from config.settings import settings
from src.bl_api.container import build_services
from src.bl_api.graphql.context import get_context
from src.bl_api.graphql.schema import schema
from src.bl_cache.backend import RedisCacheBackend
from src.bl_common.database import build_engine, build_session_factory
from src.bl_common.redis_client import close_redis, create_redis


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: connect DB + Redis and build services. Shutdown: dispose both."""
    async with AsyncExitStack() as stack:
        # Each resource is released even when a later startup step fails.
        engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
        stack.push_async_callback(engine.dispose)
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        # Cache unavailability is fatal: create_redis raises CacheUnavailableError.
        redis = await create_redis(settings.REDIS_URL)
        stack.push_async_callback(close_redis, redis)

        app.state.services = build_services(
            build_session_factory(engine),
            RedisCacheBackend(redis),
            ttl_seconds=settings.CACHE_TTL_SECONDS,
        )
        yield


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

graphql_router: GraphQLRouter = GraphQLRouter(schema, context_getter=get_context)
app.include_router(graphql_router, prefix="/graphql")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
