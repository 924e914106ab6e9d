"""AuthMiddleware -- 单一共享令牌鉴权

配置了令牌时，除健康检查外的所有请求必须携带
Authorization: Bearer <token>，否则返回 401。
"""

import secrets

import structlog
from pydantic import SecretStr
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .. import responses
from ..responses import ErrorCode

log = structlog.get_logger()

# 免鉴权路径
PUBLIC_PATHS = frozenset({"/health", "/ready"})


class AuthMiddleware(BaseHTTPMiddleware):
    """共享令牌鉴权中间件"""

    def __init__(self, app: ASGIApp, token: SecretStr) -> None:
        super().__init__(app)
        self._token = token.get_secret_value().encode()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not secrets.compare_digest(
            credentials.strip().encode(), self._token
        ):
            await log.awarning("unauthorized_request")
            return responses.error(401, ErrorCode.UNAUTHORIZED, "Unauthorized")

        return await call_next(request)
