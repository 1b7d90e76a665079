"""HTTP surface: the FastAPI app with the GraphQL router mounted.

ASGITransport does not run the lifespan, so services are injected on app.state.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.bl_common.errors import CacheUnavailableError
from src.main import app, lifespan


@pytest.fixture
async def client(services):
    app.state.services = services
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    del app.state.services


async def test_health_endpoint(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": "0.1.0"}


async def test_graphql_health_query(client: AsyncClient) -> None:
    resp = await client.post("/graphql", json={"query": "{ health }"})
    assert resp.status_code == 200
    assert resp.json() == {"data": {"health": "Server is running!"}}


async def test_graphql_mutation_then_query(client: AsyncClient) -> None:
    created = await client.post(
        "/graphql",
        json={
            "query": "mutation CreateUser { createUser(name: \"Alice\", "
            "email: \"alice@example.com\", password: \"secret\") { id } }",
            "operationName": "CreateUser",
        },
    )
    user_id = created.json()["data"]["createUser"]["id"]

    resp = await client.post(
        "/graphql",
        json={"query": "query($id: Int!) { user(id: $id) { name } }", "variables": {"id": user_id}},
    )

    assert resp.json()["data"]["user"] == {"name": "Alice"}


async def test_graphql_errors_expose_code(client: AsyncClient) -> None:
    resp = await client.post("/graphql", json={"query": "{ users(limit: 500) { total } }"})

    body = resp.json()
    assert body["data"] is None
    assert body["errors"][0]["extensions"]["code"] == 9001


class TestLifespan:
    @staticmethod
    def _engine() -> MagicMock:
        engine = MagicMock()
        engine.connect.return_value.__aenter__.return_value = AsyncMock()
        engine.dispose = AsyncMock()
        return engine

    async def test_engine_disposed_when_redis_unreachable(self) -> None:
        engine = self._engine()
        with (
            patch("src.main.build_engine", return_value=engine),
            patch("src.main.create_redis", AsyncMock(side_effect=CacheUnavailableError("down"))),
            pytest.raises(CacheUnavailableError),
        ):
            async with lifespan(FastAPI()):
                pass

        engine.dispose.assert_awaited_once()

    async def test_shutdown_releases_engine_and_redis(self) -> None:
        engine = self._engine()
        redis = MagicMock()
        target = FastAPI()
        with (
            patch("src.main.build_engine", return_value=engine),
            patch("src.main.create_redis", AsyncMock(return_value=redis)),
            patch("src.main.close_redis", AsyncMock()) as close,
        ):
            async with lifespan(target):
                assert target.state.services.cache is not None
                engine.dispose.assert_not_awaited()

        engine.dispose.assert_awaited_once()
        close.assert_awaited_once_with(redis)
