"""Integration-test fixtures (require running PostgreSQL + Redis).

Pre-condition: alembic upgrade head against DATABASE_URL.

The app lifespan is entered once per session so the engine pool and Redis
client stay valid across every test; all tests share the session event loop.
The Redis DB is flushed at startup, so point REDIS_URL at a disposable DB.
"""

from contextlib import AsyncExitStack

import pytest
import pytest_asyncio
import redis.asyncio as aioredis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from src.bl_common.errors import CacheUnavailableError
from src.bl_common.redis_client import close_redis, create_redis
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped HTTP client with the lifespan running; skips when services are down."""
    async with AsyncExitStack() as stack:
        try:
            await stack.enter_async_context(app.router.lifespan_context(app))
        except (OSError, SQLAlchemyError, CacheUnavailableError) as exc:
            pytest.skip(f"PostgreSQL/Redis unavailable: {exc}")
        await app.state.services.cache.flush()

        transport = ASGITransport(app=app)
        ac = await stack.enter_async_context(
            AsyncClient(transport=transport, base_url="http://test")
        )
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def redis(client: AsyncClient) -> aioredis.Redis:  # type: ignore[override]
    """Separate client for asserting on raw cache keys."""
    conn = await create_redis(settings.REDIS_URL)
    yield conn
    await close_redis(conn)


@pytest.fixture
def gql(client: AsyncClient):
    """POST a GraphQL document and return the decoded body."""

    async def _gql(query: str, variables: dict | None = None) -> dict:
        resp = await client.post("/graphql", json={"query": query, "variables": variables or {}})
        assert resp.status_code == 200
        return resp.json()

    return _gql
