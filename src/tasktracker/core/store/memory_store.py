"""TaskStore 内存实现

单把 asyncio.Lock 覆盖所有读写操作。
临界区内只做字典查找/插入/删除，不包含其他 await。
"""

import asyncio
from datetime import UTC, datetime, timedelta

import structlog

from ..models.enums import DEFAULT_STATUS
from ..models.task import Task, TaskFields

log = structlog.get_logger()

# updated_at 单调递增的最小步长
_TIMESTAMP_STEP = timedelta(microseconds=1)


class InMemoryTaskStore:
    """TaskStore 的内存实现

    id 由单调递增计数器分配，从 1 开始，删除后不复用。
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._tasks: dict[int, Task] = {}
        self._next_id = 1

    async def create_task(self, fields: TaskFields) -> int:
        """创建任务：分配 id、设置时间戳、强制初始状态"""
        async with self._lock:
            task_id = self._next_id
            now = datetime.now(UTC)
            task = Task(
                id=task_id,
                title=fields.title,
                description=fields.description or "",
                status=DEFAULT_STATUS,  # 忽略调用方提供的 status
                created_at=now,
                updated_at=now,
            )
            self._tasks[task_id] = task
            self._next_id += 1

        log.debug("task_inserted", task_id=task_id)
        return task_id

    async def get_task(self, task_id: int) -> Task | None:
        async with self._lock:
            return self._tasks.get(task_id)

    async def list_tasks(self) -> list[Task]:
        async with self._lock:
            return list(self._tasks.values())

    async def update_task(self, task_id: int, fields: TaskFields) -> Task | None:
        """替换 title/description/status，保留 id 与 created_at，刷新 updated_at"""
        async with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                return None

            changes = {
                "title": fields.title,
                "updated_at": self._next_timestamp(current.updated_at),
            }
            if fields.description is not None:
                changes["description"] = fields.description
            if fields.status is not None:
                changes["status"] = fields.status

            # 通过 model_validate 重新校验，保证 created_at <= updated_at
            updated = Task.model_validate({**current.model_dump(), **changes})
            self._tasks[task_id] = updated
            return updated

    async def delete_task(self, task_id: int) -> bool:
        async with self._lock:
            if task_id not in self._tasks:
                return False
            del self._tasks[task_id]
            return True

    async def count(self) -> int:
        async with self._lock:
            return len(self._tasks)

    @staticmethod
    def _next_timestamp(previous: datetime) -> datetime:
        """当前时间，且严格晚于 previous（时钟回拨时同样成立）"""
        return max(datetime.now(UTC), previous + _TIMESTAMP_STEP)
