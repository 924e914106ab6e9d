"""响应信封 -- 成功 {status, data} / 失败 {status, code, message}

所有 JSON 响应都经由此模块构造，路由与服务层不直接拼装响应体。
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel
from starlette.responses import JSONResponse, Response


class ErrorCode(StrEnum):
    """错误码"""

    BAD_FORMAT = "bad_format"
    INCORRECT_FIELD = "incorrect_field"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INTERNAL_ERROR = "internal_error"
    TIMEOUT = "timeout"


INTERNAL_ERROR_MESSAGE = "Internal server error"


class SuccessEnvelope(BaseModel):
    """成功响应信封"""

    status: str = "success"
    data: Any


class ErrorEnvelope(BaseModel):
    """失败响应信封"""

    status: str = "error"
    code: ErrorCode
    message: str


def success(data: Any, status_code: int = 200) -> JSONResponse:
    """构造成功响应；data 中的 pydantic 模型按 JSON 模式序列化"""
    return JSONResponse(
        status_code=status_code,
        content=SuccessEnvelope(data=data).model_dump(mode="json"),
    )


def error(status_code: int, code: ErrorCode, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(code=code, message=message).model_dump(mode="json"),
    )


def bad_request(code: ErrorCode, message: str) -> JSONResponse:
    return error(400, code, message)


def not_found(message: str) -> JSONResponse:
    return error(404, ErrorCode.NOT_FOUND, message)


def internal_error() -> JSONResponse:
    """500 响应不携带任何内部细节"""
    return error(500, ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE)


def no_content() -> Response:
    return Response(status_code=204)
