"""
服务器端数据模型

纯数据类，用于请求校验和响应序列化
"""
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


# 可更新字段（id 和时间戳由系统维护）
MUTABLE_FIELDS = ("username", "email", "name", "gender", "bio")


def _require_text(value: Optional[str], label: str) -> str:
    if value is None or value == "":
        raise PydanticCustomError("required", "{label} is required", {"label": label})
    return value


def _check_email(value: Optional[str]) -> str:
    value = _require_text(value, "Email")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("email_format", "Invalid email format")
    return value


# User 相关模型
class User(BaseModel):
    """用户数据模型（接口返回的完整记录）"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    username: str
    email: str
    name: str
    gender: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class UserCreate(BaseModel):
    """创建用户的请求模型"""
    # 必填字段默认 None 并强制校验，缺失时返回自定义提示而不是 "Field required"
    username: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    name: Optional[str] = Field(default=None, validate_default=True)
    gender: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("username")
    @classmethod
    def _username(cls, value):
        return _require_text(value, "Username")

    @field_validator("email")
    @classmethod
    def _email(cls, value):
        return _check_email(value)

    @field_validator("name")
    @classmethod
    def _name(cls, value):
        return _require_text(value, "Name")


class UserUpdate(BaseModel):
    """
    部分更新的请求模型

    所有字段可选。是否"提供了某字段"由 model_fields_set 记录，
    因此 {"bio": null} （清空简介）与不传 bio 是两种不同的输入。
    username / email / name 一旦提供就不能为空。
    """
    username: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("username")
    @classmethod
    def _username(cls, value):
        return _require_text(value, "Username")

    @field_validator("email")
    @classmethod
    def _email(cls, value):
        return _check_email(value)

    @field_validator("name")
    @classmethod
    def _name(cls, value):
        return _require_text(value, "Name")

    def changes(self) -> Dict[str, Optional[str]]:
        """只返回请求中显式提供的字段"""
        return {field: getattr(self, field) for field in MUTABLE_FIELDS if field in self.model_fields_set}


class UserFilters(BaseModel):
    """列表查询条件，空字符串等同于未提供"""
    username: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None

    def active(self) -> Dict[str, str]:
        return {key: value for key, value in self.model_dump().items() if value}


# 服务层统一返回结构
T = TypeVar("T")


class ServiceResult(BaseModel, Generic[T]):
    """服务层结果：成功标志 + 数据/错误信息 + 建议的 HTTP 状态码"""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    status_code: int

    @classmethod
    def ok(cls, data: Any = None, status_code: int = 200) -> "ServiceResult":
        return cls(success=True, data=data, status_code=status_code)

    @classmethod
    def fail(cls, error: str, status_code: int = 500) -> "ServiceResult":
        return cls(success=False, error=error, status_code=status_code)


class ErrorResponse(BaseModel):
    """错误响应体"""
    error: str


__all__ = [
    "MUTABLE_FIELDS",
    "User",
    "UserCreate",
    "UserUpdate",
    "UserFilters",
    "ServiceResult",
    "ErrorResponse",
]
