"""
CRUD Server - 应用构建与启动封装
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config import Settings, get_settings
from .db import Database
from .endpoints import router, users_router
from .error_handlers import register_error_handlers
from .init import check_database, check_environment, migrate_database
from .logger import get_logger

logger = get_logger("CrudServer")


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        database: 数据库句柄，为 None 时按配置中的 sqlite_path 创建
        settings: 配置，为 None 时使用进程配置
    """
    settings = settings or get_settings()
    database = database or Database(settings.sqlite_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("FastAPI 应用启动中...")
        await database.connect()
        migrate_database(database)
        yield
        logger.info("FastAPI 应用正在关闭...")
        await database.disconnect()

    app = FastAPI(
        title="CRUD Server",
        description="用户资源的增删改查服务",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.database = database

    register_error_handlers(app)
    app.include_router(router)
    app.include_router(users_router, prefix=settings.api_prefix)

    return app


def get_app() -> FastAPI:
    """uvicorn 工厂函数"""
    return create_app()


class CrudServer:
    """
    CRUD 服务器

    Examples:
        >>> server = CrudServer(db_path="database.sqlite", port=3000)
        >>> server.run()
    """

    def __init__(
        self,
        db_path: str,
        host: str = "0.0.0.0",
        port: int = 3000
    ):
        self.db_path = db_path
        self.host = host
        self.port = port

    def _validate_config(self):
        """验证必备配置"""
        errors = []

        if not self.db_path:
            errors.append("❌ 缺少数据库路径配置")

        if self.port < 1 or self.port > 65535:
            errors.append(f"❌ 端口号无效: {self.port}，必须在 1-65535 之间")

        if errors:
            logger.error("配置验证失败:")
            for error in errors:
                logger.error(f"  {error}")
            raise ValueError("缺少必备配置，服务无法启动")

        logger.info("✅ 配置验证通过")
        logger.info(f"   Database: {self.db_path}")

    def _check_database(self):
        """检查数据库状态，如果表不存在则创建"""
        logger.info("正在检查数据库...")
        db = Database(self.db_path)
        db.db.connect()
        try:
            migrate_database(db)
            check_database(db)
        finally:
            db.db.close()

    def run(self):
        """
        启动服务器

        Raises:
            ValueError: 配置验证失败
        """
        import uvicorn

        try:
            logger.info("=" * 60)
            logger.info("🚀 CRUD Server 启动中...")
            logger.info("=" * 60)

            self._validate_config()

            settings = Settings(sqlite_path=self.db_path, host=self.host, port=self.port)
            if not check_environment(settings):
                raise RuntimeError("环境检查失败")
            self._check_database()

            logger.info(f"📍 FastAPI Server: http://{self.host}:{self.port}")
            uvicorn.run(
                create_app(settings=settings),
                host=self.host,
                port=self.port,
                log_level="info",
                # 保留 logger.py 安装的转发 handler
                log_config=None
            )

        except KeyboardInterrupt:
            logger.info("收到停止信号，服务已关闭")

        except Exception as e:
            logger.opt(exception=e).error(f"❌ 服务启动失败: {e}")
            sys.exit(1)
