"""tasktracker Core Domain Models -- 公共类型导出"""

from .enums import DEFAULT_STATUS, TaskStatus
from .task import Task, TaskFields

__all__ = [
    "TaskStatus",
    "DEFAULT_STATUS",
    "Task",
    "TaskFields",
]
