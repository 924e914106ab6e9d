"""AppConfig -- 服务配置加载

从环境变量加载配置，未设置的变量使用默认值。
这些配置只影响进程启动（日志、监听端口、超时、Server 头、鉴权令牌），
不影响 Store 与请求处理的核心行为。
"""

import os
import re
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr, ValidationError

log = structlog.get_logger()

ENV_PREFIX = "TASKTRACKER_"

DEFAULT_WRITE_TIMEOUT_S = 10.0

# 支持 "10" / "10s" / "1.5s" / "500ms" / "2m"
_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0}


class ConfigError(Exception):
    """配置无法加载（必需值格式错误）"""


class RestConfig(BaseModel):
    """HTTP 服务配置

    环境变量:
        TASKTRACKER_HOST: 监听地址（默认 0.0.0.0）
        TASKTRACKER_PORT: 监听端口（默认 8080）
        TASKTRACKER_WRITE_TIMEOUT: 单个请求处理超时（默认 10s）
        TASKTRACKER_SERVER_NAME: Server 响应头（默认 tasktracker）
        TASKTRACKER_TOKEN: 共享访问令牌，为空时不启用鉴权
    """

    host: str = Field(default="0.0.0.0", description="监听地址")
    port: int = Field(default=8080, ge=1, le=65535, description="监听端口")
    write_timeout_s: float = Field(
        default=DEFAULT_WRITE_TIMEOUT_S,
        gt=0,
        description="请求处理超时（秒）",
    )
    server_name: str = Field(default="tasktracker", description="Server 响应头")
    token: SecretStr = Field(default=SecretStr(""), description="共享访问令牌")

    @property
    def auth_enabled(self) -> bool:
        return bool(self.token.get_secret_value())


class AppConfig(BaseModel):
    """服务总配置"""

    log_level: str = Field(default="INFO", description="日志级别")
    log_format: Literal["dev", "json"] = Field(default="dev", description="日志渲染模式")
    rest: RestConfig = Field(default_factory=RestConfig, description="HTTP 服务配置")


def parse_duration(value: str) -> float:
    """解析时长字符串为秒数

    Raises:
        ValueError: 格式无法识别或不为正数
    """
    match = _DURATION_RE.match(value)
    if match is None:
        raise ValueError(f"invalid duration: {value!r}")
    amount, unit = match.groups()
    seconds = float(amount) * _DURATION_UNITS[unit or "s"]
    if seconds <= 0:
        raise ValueError(f"duration must be positive: {value!r}")
    return seconds


def _env(name: str) -> str | None:
    return os.environ.get(f"{ENV_PREFIX}{name}")


def load_app_config() -> AppConfig:
    """从环境变量加载 AppConfig

    端口格式错误直接抛出 ConfigError（无法安全降级）；
    超时与日志格式错误记录 warning 并回退默认值，不阻塞启动。

    Returns:
        AppConfig 实例
    """
    rest_kwargs: dict = {}

    if val := _env("HOST"):
        rest_kwargs["host"] = val

    if val := _env("PORT"):
        try:
            rest_kwargs["port"] = int(val)
        except ValueError as e:
            raise ConfigError(f"{ENV_PREFIX}PORT must be an integer, got {val!r}") from e

    if val := _env("WRITE_TIMEOUT"):
        try:
            rest_kwargs["write_timeout_s"] = parse_duration(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var=f"{ENV_PREFIX}WRITE_TIMEOUT",
                value=val,
                fallback=DEFAULT_WRITE_TIMEOUT_S,
            )

    if val := _env("SERVER_NAME"):
        rest_kwargs["server_name"] = val

    if val := _env("TOKEN"):
        rest_kwargs["token"] = SecretStr(val)

    kwargs: dict = {}

    if val := _env("LOG_LEVEL"):
        kwargs["log_level"] = val.upper()

    if val := _env("LOG_FORMAT"):
        if val in ("dev", "json"):
            kwargs["log_format"] = val
        else:
            log.warning(
                "invalid_log_format_config",
                env_var=f"{ENV_PREFIX}LOG_FORMAT",
                value=val,
                fallback="dev",
            )

    try:
        return AppConfig(rest=RestConfig(**rest_kwargs), **kwargs)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
