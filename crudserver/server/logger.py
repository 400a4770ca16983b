"""
日志配置

所有模块通过 get_logger(name) 获取绑定了模块名的 loguru logger。
输出目标由环境变量控制：

    LOG_LEVEL       日志级别，默认 INFO
    LOG_FORMAT      loguru 格式串
    LOG_TO_CONSOLE  是否输出到 stdout，默认 true
    LOG_TO_FILE     是否写文件，默认 false
    LOG_FILE_PATH   日志文件路径，默认 logs/crud-server.log

uvicorn / fastapi 使用标准库 logging，这里统一转发到 loguru。
"""
import logging
import os
import sys
from pathlib import Path

from loguru import logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# 转发到 loguru 的标准库 logger
_FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


def _env_flag(key: str, default: bool) -> bool:
    return os.getenv(key, str(default)).strip().lower() in ("1", "true", "yes", "on")


class _LoguruHandler(logging.Handler):
    """把标准库 logging 记录交给 loguru"""

    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 跳过 logging 模块自身的栈帧，让 loguru 显示真实调用位置
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logger(level: str = None, to_console: bool = None, to_file: bool = None,
                 file_path: str = None, fmt: str = None):
    """
    (重新)配置日志输出，未传入的参数从环境变量读取

    可重复调用，每次都会替换之前的输出目标。
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    fmt = fmt or os.getenv("LOG_FORMAT", DEFAULT_FORMAT)
    to_console = _env_flag("LOG_TO_CONSOLE", True) if to_console is None else to_console
    to_file = _env_flag("LOG_TO_FILE", False) if to_file is None else to_file
    file_path = file_path or os.getenv("LOG_FILE_PATH", "logs/crud-server.log")

    logger.remove()
    logger.configure(extra={"name": "crudserver"})

    if to_console:
        logger.add(sys.stdout, format=fmt, level=level, colorize=True, backtrace=True, diagnose=False)

    if to_file:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            file_path,
            format=fmt,
            level=level,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=False
        )

    handler = _LoguruHandler()
    for name in _FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False

    logger.debug(f"日志已配置 - 级别: {level}, 控制台: {to_console}, 文件: {to_file}")


def get_logger(name: str = None):
    """
    获取 logger 实例

    Args:
        name: 模块名称，显示在日志的 name 列
    """
    if name:
        return logger.bind(name=name)
    return logger


# 导入时按环境变量初始化
setup_logger()

__all__ = ["logger", "get_logger", "setup_logger"]
