"""
Web 服务启动脚本
"""

import os

import uvicorn

from forexa.core.config import ConfigManager
from forexa.core.logging import configure_logging
from forexa.web.app import create_app


def main() -> None:
    """启动 FastAPI Web 服务"""

    config = ConfigManager().get_config()
    configure_logging(
        level=config.logging.level,
        file_output=config.logging.file is not None,
        file_path=config.logging.file,
    )
    reload = os.getenv("FOREXA_RELOAD", "false").lower() == "true"

    if reload:
        uvicorn.run(
            "forexa.web.main:create_app",
            factory=True,
            host=config.web.host,
            port=config.web.port,
            reload=True,
            log_level="info",
        )
    else:
        uvicorn.run(create_app(config=config), host=config.web.host, port=config.web.port, log_level="info")


if __name__ == "__main__":
    main()
