"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，验证 TaskStore 可用并返回当前任务数量。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查

    检查项：
    1. task_store: Store 已初始化且可响应
    2. task_count: 当前任务数量
    """
    checks: dict = {}
    all_ok = True

    store = getattr(request.app.state, "task_store", None)
    if store is None:
        checks["task_store"] = "unavailable"
        all_ok = False
    else:
        try:
            checks["task_count"] = await store.count()
            checks["task_store"] = "ok"
        except Exception:
            log.exception("ready_check_failed", check="task_store")
            checks["task_store"] = "unavailable"
            all_ok = False

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
