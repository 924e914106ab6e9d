"""gateway 测试配置 -- FastAPI app + httpx AsyncClient"""

import os
from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tasktracker.core.config import AppConfig
from tasktracker.core.store import InMemoryTaskStore


@pytest_asyncio.fixture
async def app(store: InMemoryTaskStore):
    """创建测试用 FastAPI app 实例，手动初始化 Store（绕过 lifespan）"""
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from tasktracker.gateway.main import create_app

    application = create_app(AppConfig())
    application.state.task_store = store
    yield application

    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
