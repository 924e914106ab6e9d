"""Store Protocol 接口定义

使用 Python Protocol 实现结构化子类型（duck typing）。
"不存在" 是正常结果（None / False），真正的失败以异常抛出，二者不混用。
"""

from typing import Protocol

from ..models.task import Task, TaskFields


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, fields: TaskFields) -> int:
        """创建任务，返回新分配的 id"""
        ...

    async def get_task(self, task_id: int) -> Task | None:
        """根据 id 查询任务，不存在返回 None"""
        ...

    async def list_tasks(self) -> list[Task]:
        """查询全部任务，顺序不作保证"""
        ...

    async def update_task(self, task_id: int, fields: TaskFields) -> Task | None:
        """更新任务，不存在返回 None 且不修改任何状态"""
        ...

    async def delete_task(self, task_id: int) -> bool:
        """删除任务，不存在返回 False 且不修改任何状态"""
        ...

    async def count(self) -> int:
        """当前任务数量"""
        ...
