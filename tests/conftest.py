"""全局 pytest 配置 -- 内存 Store fixture"""

import pytest_asyncio
from tasktracker.core.store import InMemoryTaskStore


@pytest_asyncio.fixture
async def store() -> InMemoryTaskStore:
    """提供全新的内存 TaskStore"""
    return InMemoryTaskStore()
