"""枚举定义

TaskStatus 为封闭集合：pending / in_progress / done。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"


# 创建时强制使用的初始状态
DEFAULT_STATUS: TaskStatus = TaskStatus.PENDING
