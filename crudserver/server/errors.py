"""
错误类型

存储层抛出带 kind 的 StorageError，服务层据此映射状态码，无需解析错误文本；
校验层抛出 InvalidInput，由接口层统一转换为 400。
"""
from enum import Enum


class StorageErrorKind(str, Enum):
    """存储错误分类"""
    UNIQUENESS_VIOLATION = "uniqueness_violation"
    OTHER = "other"


class StorageError(Exception):
    """存储层错误基类"""

    def __init__(self, message: str, kind: StorageErrorKind = StorageErrorKind.OTHER):
        super().__init__(message)
        self.message = message
        self.kind = kind


class UniquenessViolation(StorageError):
    """插入或更新违反唯一约束（username / email）"""

    def __init__(self, message: str = "Unique constraint violated"):
        super().__init__(message, StorageErrorKind.UNIQUENESS_VIOLATION)


class InvalidInput(Exception):
    """请求参数不合法，message 已合并所有校验失败信息"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


__all__ = [
    "StorageErrorKind",
    "StorageError",
    "UniquenessViolation",
    "InvalidInput",
]
