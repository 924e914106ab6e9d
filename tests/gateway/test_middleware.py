"""中间件测试

测试内容：
1. 共享令牌鉴权：缺失/错误令牌 401，正确令牌放行，健康检查免鉴权
2. 请求超时返回 503，且不回滚已完成的 Store 修改
"""

import asyncio

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from tasktracker.core.config import AppConfig, RestConfig
from tasktracker.core.store import InMemoryTaskStore


def _build_app(store: InMemoryTaskStore, **rest_kwargs):
    from tasktracker.gateway.main import create_app

    app = create_app(AppConfig(rest=RestConfig(**rest_kwargs)))
    app.state.task_store = store
    return app


@pytest_asyncio.fixture
async def auth_client(store: InMemoryTaskStore):
    app = _build_app(store, token=SecretStr("s3cret"))
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


class TestAuth:
    async def test_missing_token_rejected(self, auth_client: AsyncClient, store):
        resp = await auth_client.post("/tasks", json={"title": "a"})
        assert resp.status_code == 401
        assert resp.json() == {
            "status": "error",
            "code": "unauthorized",
            "message": "Unauthorized",
        }
        assert await store.count() == 0

    async def test_wrong_token_rejected(self, auth_client: AsyncClient):
        resp = await auth_client.get(
            "/tasks", headers={"Authorization": "Bearer nope"}
        )
        assert resp.status_code == 401

    async def test_wrong_scheme_rejected(self, auth_client: AsyncClient):
        resp = await auth_client.get("/tasks", headers={"Authorization": "Basic s3cret"})
        assert resp.status_code == 401

    async def test_valid_token_accepted(self, auth_client: AsyncClient):
        resp = await auth_client.post(
            "/tasks",
            json={"title": "a"},
            headers={"Authorization": "Bearer s3cret"},
        )
        assert resp.status_code == 201

    async def test_health_is_public(self, auth_client: AsyncClient):
        assert (await auth_client.get("/health")).status_code == 200
        assert (await auth_client.get("/ready")).status_code == 200

    async def test_auth_disabled_without_token(self, client: AsyncClient):
        resp = await client.post("/tasks", json={"title": "a"})
        assert resp.status_code == 201


class _SlowStore(InMemoryTaskStore):
    """创建完成后再阻塞，模拟响应阶段超时"""

    async def create_task(self, fields):
        task_id = await super().create_task(fields)
        await asyncio.sleep(0.5)
        return task_id


class TestTimeout:
    async def test_slow_request_times_out(self):
        store = _SlowStore()
        app = _build_app(store, write_timeout_s=0.05)

        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            resp = await ac.post("/tasks", json={"title": "slow"})

        assert resp.status_code == 503
        assert resp.json()["code"] == "timeout"
        # 超时只放弃响应，已完成的写入保留
        assert await store.count() == 1

    async def test_fast_request_unaffected(self, store: InMemoryTaskStore):
        app = _build_app(store, write_timeout_s=5)
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            resp = await ac.post("/tasks", json={"title": "fast"})
        assert resp.status_code == 201
