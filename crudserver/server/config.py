import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def find_env_file() -> Optional[str]:
    """
    查找.env文件

    查找顺序：
    1. 环境变量 CRUD_ENV_FILE 指定的路径
    2. 当前工作目录
    3. 当前工作目录的父目录（向上最多3级）
    4. 用户home目录下的 .crudserver/.env
    """
    env_path = os.getenv('CRUD_ENV_FILE')
    if env_path and Path(env_path).exists():
        return env_path

    current = Path.cwd()
    for _ in range(4):  # 最多向上查找3级
        env_file = current / '.env'
        if env_file.exists():
            return str(env_file)
        if current.parent == current:  # 到达根目录
            break
        current = current.parent

    home_env = Path.home() / '.crudserver' / '.env'
    if home_env.exists():
        return str(home_env)

    return '.env'


class Settings(BaseSettings):
    """应用配置管理"""

    # 数据库配置
    sqlite_path: str = Field(default="database.sqlite")

    # 服务器配置
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    api_prefix: str = Field(default="/api")

    # 开发环境设置
    debug: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=find_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._validate_settings()

    def _validate_settings(self):
        """验证配置的有效性"""
        if not self.sqlite_path:
            raise ValueError("SQLITE_PATH must be specified")

        if self.port < 1 or self.port > 65535:
            raise ValueError("PORT must be between 1 and 65535")

        if self.api_prefix and not self.api_prefix.startswith("/"):
            raise ValueError("API_PREFIX must start with '/'")


# 全局配置实例
settings = Settings()


def get_settings() -> Settings:
    """获取配置实例"""
    return settings
