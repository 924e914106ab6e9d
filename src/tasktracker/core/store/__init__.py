"""tasktracker Core Store -- 并发内存实现

进程内只应存在一个 Store 实例，由应用启动时显式构造并注入请求处理层。
"""

from .memory_store import InMemoryTaskStore
from .protocols import TaskStore

__all__ = [
    "TaskStore",
    "InMemoryTaskStore",
]
