#!/usr/bin/env python3
"""
CRUD Server - 统一启动脚本

从配置（环境变量 / .env）读取数据库路径和监听地址并启动服务
"""
from crudserver.server.config import get_settings
from crudserver.server.server import CrudServer


if __name__ == "__main__":
    settings = get_settings()

    server = CrudServer(
        db_path=settings.sqlite_path,
        host=settings.host,
        port=settings.port
    )
    server.run()
