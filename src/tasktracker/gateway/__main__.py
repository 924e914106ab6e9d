"""服务入口 -- python -m tasktracker.gateway

加载环境变量配置，使用 uvicorn 启动 HTTP 服务。
"""

import sys

import structlog
import uvicorn
from tasktracker.core.config import ConfigError, load_app_config

from .main import create_app

log = structlog.get_logger()


def main() -> None:
    """CLI 主入口"""
    try:
        config = load_app_config()
    except ConfigError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        sys.exit(1)

    app = create_app(config)
    log.info(
        "server_starting",
        host=config.rest.host,
        port=config.rest.port,
        server_name=config.rest.server_name,
        auth_enabled=config.rest.auth_enabled,
        write_timeout_s=config.rest.write_timeout_s,
    )

    uvicorn.run(
        app,
        host=config.rest.host,
        port=config.rest.port,
        log_config=None,  # 沿用 structlog 配置的根 logger
        server_header=False,
        headers=[("server", config.rest.server_name)],
    )


if __name__ == "__main__":
    main()
