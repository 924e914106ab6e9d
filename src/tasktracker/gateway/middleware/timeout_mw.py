"""TimeoutMiddleware -- 请求处理超时

超时只放弃响应（返回 503），已完成的 Store 修改不回滚。
"""

import asyncio

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .. import responses
from ..responses import ErrorCode

log = structlog.get_logger()


class TimeoutMiddleware(BaseHTTPMiddleware):
    """为每个请求设置处理时限"""

    def __init__(self, app: ASGIApp, timeout_s: float) -> None:
        super().__init__(app)
        self._timeout_s = timeout_s

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self._timeout_s)
        except TimeoutError:
            await log.awarning("request_timeout", timeout_s=self._timeout_s)
            return responses.error(503, ErrorCode.TIMEOUT, "Request timed out")
