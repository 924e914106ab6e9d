"""Task Domain Model

Task 由 Store 独占持有；对外暴露的实例不可变（frozen），
修改只能通过 Store.update_task 生成新实例。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import DEFAULT_STATUS, TaskStatus


class Task(BaseModel):
    """Task 数据模型

    id 由 Store 分配，创建后不可变；
    created_at 只在创建时设置，updated_at 每次成功更新时刷新。
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0, description="唯一标识，Store 分配的正整数")
    title: str = Field(min_length=1, description="任务标题")
    description: str = Field(default="", description="任务描述")
    status: TaskStatus = Field(default=DEFAULT_STATUS, description="当前状态")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @model_validator(mode="after")
    def _check_timestamps(self) -> "Task":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self


class TaskFields(BaseModel):
    """调用方提供的可变字段

    create: status 被忽略，description 缺省为空字符串
    update: title 必替换；description/status 为 None 时保留原值
    """

    title: str = Field(min_length=1, description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    status: TaskStatus | None = Field(default=None, description="目标状态")
