"""tasktracker -- 任务追踪后端

core: 领域模型 + 并发内存 Store + 配置
gateway: FastAPI 请求处理层
"""

__version__ = "0.1.0"
