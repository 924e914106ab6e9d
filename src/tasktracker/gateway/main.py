"""FastAPI 应用主文件

app 创建 + lifespan 管理：Store 初始化 + 中间件/路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from tasktracker import __version__
from tasktracker.core.config import AppConfig, load_app_config
from tasktracker.core.store import InMemoryTaskStore

from .middleware.auth_mw import AuthMiddleware
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.timeout_mw import TimeoutMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时构造唯一的 TaskStore 实例"""
    app.state.task_store = InMemoryTaskStore()
    log.info("task_store_initialized", store="memory")

    yield

    # 内存 Store 不跨进程持久化，关闭时直接丢弃
    log.info("task_store_released", task_count=await app.state.task_store.count())
    app.state.task_store = None


def create_app(config: AppConfig | None = None) -> FastAPI:
    """创建 FastAPI 应用实例

    Args:
        config: 服务配置，缺省时从环境变量加载
    """
    config = config or load_app_config()

    app = FastAPI(
        title="tasktracker",
        version=__version__,
        description="Task tracking backend",
        lifespan=lifespan,
    )
    app.state.config = config

    # 注册中间件（后注册者在外层：Logging -> Trace -> Auth -> Timeout）
    app.add_middleware(TimeoutMiddleware, timeout_s=config.rest.write_timeout_s)
    if config.rest.auth_enabled:
        app.add_middleware(AuthMiddleware, token=config.rest.token)
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging(config.log_level, config.log_format)
    setup_logfire()

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app
