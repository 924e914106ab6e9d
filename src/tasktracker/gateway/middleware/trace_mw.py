"""TraceMiddleware

/tasks/{task_id} 请求将路径中的 task_id 绑定到 structlog contextvars，
同一请求内的所有日志都携带该字段。
与 TaskService 使用同一个 task_id 键：merge_contextvars 不覆盖显式传入的字段，
解析成功后服务层记录的整数 task_id 优先，格式错误时日志中保留原始片段。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


def extract_task_id(path: str) -> str | None:
    """从 /tasks/{task_id} 提取原始 task_id 片段（不做格式校验）"""
    parts = [p for p in path.split("/") if p]
    if len(parts) == 2 and parts[0] == "tasks":
        return parts[1]
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        task_id = extract_task_id(request.url.path)
        if task_id is not None:
            structlog.contextvars.bind_contextvars(task_id=task_id)

        return await call_next(request)
