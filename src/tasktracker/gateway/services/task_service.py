"""TaskService -- 请求处理：校验 -> 调用 Store -> 映射响应

处理流程：
1. 解析路径中的 task_id（格式错误直接 400，不触达 Store）
2. 解析并校验请求体（格式错误 / 字段校验失败 400）
3. 调用 Store
4. 将结果映射为统一响应信封与状态码

Store 的 "不存在" 结果（None / False）映射为 404；
Store 抛出的任何异常映射为 500，细节只写入日志。
"""

import json
import re
from collections.abc import Awaitable
from typing import TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator
from starlette.responses import Response
from tasktracker.core.models import TaskFields, TaskStatus
from tasktracker.core.store import TaskStore

from .. import responses
from ..responses import ErrorCode

log = structlog.get_logger()

T = TypeVar("T")

# 可选符号 + ASCII 十进制数字（不接受空白、下划线、全角数字）
_TASK_ID_RE = re.compile(r"[+-]?[0-9]+")

INVALID_ID_MESSAGE = "Invalid task ID format"
INVALID_BODY_MESSAGE = "Invalid request body"
TASK_NOT_FOUND_MESSAGE = "Task not found"
NO_TASKS_MESSAGE = "No tasks found"


class CreateTaskRequest(BaseModel):
    """创建任务请求体

    不声明 status：请求中携带的 status 无论取值如何都被忽略，新任务一律 pending。
    """

    model_config = ConfigDict(extra="ignore")

    title: StrictStr = Field(min_length=1, description="任务标题")
    description: StrictStr | None = Field(default=None, description="任务描述")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def to_fields(self) -> TaskFields:
        return TaskFields(title=self.title, description=self.description)


class UpdateTaskRequest(CreateTaskRequest):
    """更新任务请求体 -- description/status 缺省时保留原值"""

    status: TaskStatus | None = Field(default=None, description="目标状态")

    def to_fields(self) -> TaskFields:
        return TaskFields(
            title=self.title,
            description=self.description,
            status=self.status,
        )


RequestT = TypeVar("RequestT", bound=CreateTaskRequest)


class BadFormatError(Exception):
    """请求体无法反序列化为预期结构"""


class IncorrectFieldError(Exception):
    """字段校验失败"""


def parse_task_id(raw: str) -> int | None:
    """解析路径中的 task_id，格式错误返回 None"""
    if _TASK_ID_RE.fullmatch(raw) is None:
        return None
    return int(raw)


def parse_task_request(
    body: bytes,
    model: type[RequestT],
) -> RequestT:
    """反序列化并校验请求体

    Args:
        body: 原始请求体
        model: 目标请求模型（create 使用 CreateTaskRequest）

    Raises:
        BadFormatError: 非 JSON、嵌套过深、非对象、字段类型不匹配
        IncorrectFieldError: 字段值校验失败（消息为校验器输出）
    """
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise BadFormatError(str(e)) from e

    if not isinstance(payload, dict):
        raise BadFormatError(f"expected JSON object, got {type(payload).__name__}")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        # 类型不匹配视为结构错误，而非字段值错误
        if any(err["type"].endswith("_type") for err in errors):
            raise BadFormatError(_format_errors(errors)) from e
        raise IncorrectFieldError(_format_errors(errors)) from e


def _format_errors(errors: list) -> str:
    parts = []
    for err in errors:
        field = ".".join(str(p) for p in err["loc"]) or "body"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


class _StoreFailure(Exception):
    """Store 调用抛出非预期异常"""


class TaskService:
    """任务请求处理服务

    每个请求构造一个实例，Store 通过构造函数注入。
    """

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    async def create_task(self, body: bytes) -> Response:
        """POST /tasks -- 201 {task_id}"""
        request = self._parse_body(body, CreateTaskRequest)
        if isinstance(request, Response):
            return request

        try:
            task_id = await self._call_store(
                self._store.create_task(request.to_fields()), "create_task"
            )
        except _StoreFailure:
            return responses.internal_error()

        log.info("task_created", task_id=task_id)
        return responses.success({"task_id": task_id}, status_code=201)

    async def get_task(self, raw_id: str) -> Response:
        """GET /tasks/{id} -- 200 task"""
        task_id = self._parse_id(raw_id)
        if isinstance(task_id, Response):
            return task_id

        try:
            task = await self._call_store(self._store.get_task(task_id), "get_task", task_id)
        except _StoreFailure:
            return responses.internal_error()

        if task is None:
            log.warning("task_not_found", task_id=task_id)
            return responses.not_found(TASK_NOT_FOUND_MESSAGE)

        return responses.success(task)

    async def list_tasks(self) -> Response:
        """GET /tasks -- 200 [task]；空集合视为 404"""
        try:
            tasks = await self._call_store(self._store.list_tasks(), "list_tasks")
        except _StoreFailure:
            return responses.internal_error()

        if not tasks:
            log.warning("no_tasks_found")
            return responses.not_found(NO_TASKS_MESSAGE)

        return responses.success(tasks)

    async def update_task(self, raw_id: str, body: bytes) -> Response:
        """PUT /tasks/{id} -- 200 {task_id}"""
        task_id = self._parse_id(raw_id)
        if isinstance(task_id, Response):
            return task_id

        request = self._parse_body(body, UpdateTaskRequest)
        if isinstance(request, Response):
            return request

        try:
            task = await self._call_store(
                self._store.update_task(task_id, request.to_fields()),
                "update_task",
                task_id,
            )
        except _StoreFailure:
            return responses.internal_error()

        if task is None:
            log.warning("task_not_found", task_id=task_id)
            return responses.not_found(TASK_NOT_FOUND_MESSAGE)

        log.info("task_updated", task_id=task_id, status=task.status.value)
        return responses.success({"task_id": task_id})

    async def delete_task(self, raw_id: str) -> Response:
        """DELETE /tasks/{id} -- 204"""
        task_id = self._parse_id(raw_id)
        if isinstance(task_id, Response):
            return task_id

        try:
            deleted = await self._call_store(
                self._store.delete_task(task_id), "delete_task", task_id
            )
        except _StoreFailure:
            return responses.internal_error()

        if not deleted:
            log.warning("task_not_found", task_id=task_id)
            return responses.not_found(TASK_NOT_FOUND_MESSAGE)

        log.info("task_deleted", task_id=task_id)
        return responses.no_content()

    @staticmethod
    def _parse_id(raw_id: str) -> int | Response:
        task_id = parse_task_id(raw_id)
        if task_id is None:
            log.warning("invalid_task_id", raw_id=raw_id)
            return responses.bad_request(ErrorCode.INCORRECT_FIELD, INVALID_ID_MESSAGE)
        return task_id

    @staticmethod
    def _parse_body(body: bytes, model: type[RequestT]) -> RequestT | Response:
        try:
            return parse_task_request(body, model)
        except BadFormatError as e:
            log.warning("invalid_request_body", error=str(e))
            return responses.bad_request(ErrorCode.BAD_FORMAT, INVALID_BODY_MESSAGE)
        except IncorrectFieldError as e:
            log.warning("task_validation_failed", error=str(e))
            return responses.bad_request(ErrorCode.INCORRECT_FIELD, str(e))

    @staticmethod
    async def _call_store(
        call: Awaitable[T],
        operation: str,
        task_id: int | None = None,
    ) -> T:
        """执行 Store 调用；非预期异常记录完整上下文后转为 _StoreFailure"""
        try:
            return await call
        except Exception as e:
            log.exception("task_store_failure", operation=operation, task_id=task_id)
            raise _StoreFailure(operation) from e
